import os
import tempfile
import unittest

from s3client.batch import (
    apply_recursive,
    copy_transform,
    delete_transform,
    download_transform,
    move_transform,
    run_batch,
    upload_items,
    upload_transform,
    walk_local,
)
from s3client.errors import BatchError, LocalFileError, StoreError
from s3client.models import ObjectInfo

from tests.fakes import FakeStore, write_file

OBJECTS = {
    'src/': b'',
    'src/a.txt': b'aaa',
    'src/sub/b.txt': b'bbbbb',
    'src/sub/c.txt': b'c',
    'other/d.txt': b'dd',
}


class RunBatchTests(unittest.TestCase):
    def test_collects_keys_and_bytes(self):
        seen = []
        result = run_batch([ObjectInfo('x', 2), ObjectInfo('y', 3)], lambda obj: obj.size, progress=seen.append)
        self.assertEqual(result.keys, ['x', 'y'])
        self.assertEqual(result.total_bytes, 5)
        self.assertEqual(seen, ['x', 'y'])
        self.assertIsNone(result.error)

    def test_stops_at_first_error(self):
        calls = []

        def transform(obj):
            calls.append(obj.key)
            if obj.key == 'b':
                raise StoreError("boom", code='InternalError')
            return obj.size

        with self.assertRaises(BatchError) as ctx:
            run_batch([ObjectInfo('a', 1), ObjectInfo('b', 1), ObjectInfo('c', 1)], transform)

        self.assertEqual(calls, ['a', 'b'])
        error = ctx.exception
        self.assertEqual(error.item, 'b')
        self.assertEqual(error.result.keys, ['a'])
        self.assertIsInstance(error.cause, StoreError)
        self.assertIn('1 file', str(error))
        self.assertIn('no rollback', str(error))

    def test_first_item_failure_has_plain_message(self):
        def transform(obj):
            raise StoreError("denied")

        with self.assertRaises(BatchError) as ctx:
            run_batch([ObjectInfo('a', 1)], transform)
        self.assertEqual(str(ctx.exception), "denied")

    def test_os_error_becomes_local_file_error(self):
        def transform(obj):
            raise FileNotFoundError(2, 'No such file or directory', '/tmp/missing')

        with self.assertRaises(BatchError) as ctx:
            run_batch([ObjectInfo('a', 1)], transform)
        self.assertIsInstance(ctx.exception.cause, LocalFileError)
        self.assertIn('/tmp/missing', str(ctx.exception))


class RecursiveTransformTests(unittest.TestCase):
    def setUp(self):
        self.store = FakeStore({'bucket': OBJECTS})

    def test_delete_only_below_prefix(self):
        result = apply_recursive(self.store, 'bucket', 'src/', delete_transform(self.store, 'bucket'))
        self.assertEqual(result.count, 4)
        self.assertEqual(sorted(self.store.buckets['bucket']), ['other/d.txt'])

    def test_copy_mirrors_keys(self):
        transform = copy_transform(self.store, 'bucket', 'src/', 'dst/')
        result = apply_recursive(self.store, 'bucket', 'src/', transform)
        self.assertEqual(result.total_bytes, 9)
        keys = set(self.store.buckets['bucket'])
        self.assertTrue({'dst/', 'dst/a.txt', 'dst/sub/b.txt', 'dst/sub/c.txt'} <= keys)
        self.assertIn('src/a.txt', keys)

    def test_move_copies_before_each_delete(self):
        transform = move_transform(self.store, 'bucket', 'src/', 'dst/')
        apply_recursive(self.store, 'bucket', 'src/', transform)

        keys = set(self.store.buckets['bucket'])
        self.assertEqual(keys, {'dst/', 'dst/a.txt', 'dst/sub/b.txt', 'dst/sub/c.txt', 'other/d.txt'})
        for i, call in enumerate(self.store.calls):
            if call[0] == 'remove_object':
                self.assertEqual(self.store.calls[i - 1], ('copy_object', call[1], 'dst/' + call[1][4:]))

    def test_move_failure_keeps_unprocessed_sources(self):
        self.store.failures[('copy_object', 'src/sub/b.txt')] = StoreError("copy failed")
        transform = move_transform(self.store, 'bucket', 'src/', 'dst/')

        with self.assertRaises(BatchError) as ctx:
            apply_recursive(self.store, 'bucket', 'src/', transform)

        keys = set(self.store.buckets['bucket'])
        self.assertEqual(ctx.exception.result.keys, ['src/', 'src/a.txt'])
        self.assertIn('src/sub/b.txt', keys)
        self.assertIn('src/sub/c.txt', keys)
        self.assertNotIn('src/a.txt', keys)
        self.assertIn('dst/a.txt', keys)

    def test_download_mirrors_tree(self):
        with tempfile.TemporaryDirectory() as tmp:
            transform = download_transform(self.store, 'bucket', 'src/', tmp)
            result = apply_recursive(self.store, 'bucket', 'src/', transform)
            self.assertEqual(result.total_bytes, 9)
            with open(os.path.join(tmp, 'sub', 'b.txt'), 'rb') as f:
                self.assertEqual(f.read(), b'bbbbb')
            self.assertTrue(os.path.isfile(os.path.join(tmp, 'a.txt')))


class UploadTests(unittest.TestCase):
    def test_walk_local_and_upload(self):
        store = FakeStore({'bucket': {}})
        with tempfile.TemporaryDirectory() as tmp:
            write_file(os.path.join(tmp, 'top.txt'), b'12')
            write_file(os.path.join(tmp, 'nested', 'deep', 'x.bin'), b'1234')

            rel_keys = [rel for _, rel in walk_local(tmp)]
            self.assertEqual(rel_keys, ['top.txt', 'nested/deep/x.bin'])

            result = run_batch(upload_items(tmp, 'up/'), upload_transform(store, 'bucket'))

        self.assertEqual(sorted(result.keys), ['up/nested/deep/x.bin', 'up/top.txt'])
        self.assertEqual(result.total_bytes, 6)
        self.assertEqual(store.buckets['bucket']['up/nested/deep/x.bin'], b'1234')


if __name__ == '__main__':
    unittest.main()
