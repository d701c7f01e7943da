import io
import unittest
from contextlib import closing, redirect_stderr

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import EndpointConnectionError

from s3client.environments import ConnectionTarget
from s3client.errors import AlreadyExists, NotFound, StoreError
from s3client.providers.s3 import S3Store, create_s3_client

from tests.fakes import FakeS3Client, client_error

PAGES = [
    {
        'Contents': [{'Key': 'docs/readme.md', 'Size': 10}],
        'CommonPrefixes': [{'Prefix': 'docs/api/'}],
    },
    {
        'Contents': [{'Key': 'docs/zeta.txt', 'Size': 3}],
    },
]


class S3StoreListingTests(unittest.TestCase):
    def test_shallow_listing_merges_prefixes(self):
        client = FakeS3Client(PAGES)
        store = S3Store(client)
        objects = list(store.iter_objects('bucket', 'docs/'))

        self.assertEqual([o.key for o in objects], ['docs/api/', 'docs/readme.md', 'docs/zeta.txt'])
        self.assertTrue(objects[0].is_dir)
        self.assertEqual(objects[1].size, 10)
        self.assertEqual(client.paginate_calls, [{'Bucket': 'bucket', 'Prefix': 'docs/', 'Delimiter': '/'}])

    def test_recursive_listing_has_no_delimiter(self):
        client = FakeS3Client(PAGES)
        list(S3Store(client).iter_objects('bucket', '', recursive=True))
        self.assertEqual(client.paginate_calls, [{'Bucket': 'bucket', 'Prefix': ''}])

    def test_listing_can_stop_early(self):
        client = FakeS3Client(PAGES)
        with closing(S3Store(client).iter_objects('bucket', 'docs/')) as objects:
            first = next(objects)
        self.assertEqual(first.key, 'docs/api/')

    def test_listing_errors_are_wrapped(self):
        client = FakeS3Client()
        client.list_error = client_error('NoSuchBucket', 'ListObjectsV2')
        with self.assertRaises(NotFound):
            list(S3Store(client).iter_objects('gone', ''))

        client.list_error = client_error('AccessDenied', 'ListObjectsV2')
        with self.assertRaises(StoreError) as ctx:
            list(S3Store(client).iter_objects('locked', ''))
        self.assertEqual(ctx.exception.code, 'AccessDenied')

    def test_verbose_listing_goes_to_stderr(self):
        err = io.StringIO()
        with redirect_stderr(err):
            list(S3Store(FakeS3Client(), verbose=True).iter_objects('bucket', 'a/'))
        self.assertIn('[List: bucket/a/]', err.getvalue())


class S3StoreOperationTests(unittest.TestCase):
    def setUp(self):
        self.client = FakeS3Client()
        self.store = S3Store(self.client)

    def test_list_buckets_sorted(self):
        self.assertEqual(self.store.list_buckets(), ['alpha', 'zeta'])

    def test_bucket_exists(self):
        self.assertTrue(self.store.bucket_exists('bucket'))
        self.client.errors['head_bucket'] = client_error('404', 'HeadBucket')
        self.assertFalse(self.store.bucket_exists('bucket'))
        self.client.errors['head_bucket'] = client_error('403', 'HeadBucket')
        with self.assertRaises(StoreError):
            self.store.bucket_exists('bucket')

    def test_make_bucket_conflict(self):
        self.client.errors['create_bucket'] = client_error('BucketAlreadyOwnedByYou', 'CreateBucket')
        with self.assertRaises(AlreadyExists):
            self.store.make_bucket('mine')

    def test_get_object(self):
        self.assertEqual(self.store.get_object('bucket', 'a.txt'), b'content of a.txt')
        self.client.errors['get_object'] = client_error('NoSuchKey', 'GetObject')
        with self.assertRaises(NotFound):
            self.store.get_object('bucket', 'a.txt')

    def test_copy_object_within_bucket(self):
        self.store.copy_object('bucket', 'a', 'b')
        self.assertEqual(self.client.calls[-1], ('copy_object', {
            'Bucket': 'bucket',
            'Key': 'b',
            'CopySource': {'Bucket': 'bucket', 'Key': 'a'},
        }))

    def test_put_and_remove(self):
        self.store.put_object('bucket', 'dir/')
        self.store.remove_object('bucket', 'dir/')
        self.assertEqual([c[0] for c in self.client.calls], ['put_object', 'delete_object'])
        self.assertEqual(self.client.calls[0][1]['Body'], b'')

    def test_connection_errors_are_wrapped(self):
        self.client.errors['delete_bucket'] = EndpointConnectionError(endpoint_url='http://nowhere')
        with self.assertRaises(StoreError) as ctx:
            self.store.remove_bucket('bucket')
        self.assertIsNone(ctx.exception.code)

    def test_upload_failure_is_wrapped(self):
        self.client.errors['upload_file'] = S3UploadFailedError('Failed to upload')
        with self.assertRaises(StoreError):
            self.store.upload_file('/tmp/x', 'bucket', 'x')


class CreateClientTests(unittest.TestCase):
    def test_client_uses_target_endpoint(self):
        target = ConnectionTarget(
            key='local', endpoint='localhost:9000', secure=False,
            access_key='AK', secret_key='SK',
        )
        client = create_s3_client(target)
        self.assertEqual(client.meta.endpoint_url, 'http://localhost:9000')
        self.assertEqual(client.meta.region_name, 'us-east-1')


if __name__ == '__main__':
    unittest.main()
