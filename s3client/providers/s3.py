import sys
from typing import Iterator, List, Optional

import boto3
import botocore.client
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import AlreadyExists, NotFound, S3ClientError, StoreError
from ..models import ObjectInfo
from .base import ObjectStore

MISSING_CODES = ('404', 'NoSuchBucket', 'NotFound', 'NoSuchKey')
EXISTS_CODES = ('BucketAlreadyExists', 'BucketAlreadyOwnedByYou')


def error_code(e: ClientError) -> str:
    return e.response.get('Error', {}).get('Code', 'Unknown')


def create_s3_client(target):
    """Create a boto3 S3 client for a connection target."""
    return boto3.client(
        's3',
        endpoint_url=target.endpoint_url,
        aws_access_key_id=target.access_key,
        aws_secret_access_key=target.secret_key,
        region_name=target.region or 'us-east-1',
        config=botocore.client.Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        ),
    )


class S3Store(ObjectStore):
    def __init__(self, s3_client, verbose: bool = False):
        self.s3_client = s3_client
        self.verbose = verbose

    def _wrap(self, e, action, bucket, key: Optional[str] = None) -> S3ClientError:
        location = f"{bucket}/{key}" if key is not None else bucket
        if isinstance(e, ClientError):
            code = error_code(e)
            if code in MISSING_CODES:
                return NotFound(f"{action} '{location}' failed: {code}")
            return StoreError(f"{action} '{location}' failed: {code}", code=code)
        return StoreError(f"{action} '{location}' failed: {e}")

    def list_buckets(self) -> List[str]:
        try:
            resp = self.s3_client.list_buckets()
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Listing buckets at', '') from e
        return sorted(b['Name'] for b in resp.get('Buckets', []))

    def bucket_exists(self, bucket: str) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=bucket)
        except ClientError as e:
            if error_code(e) in MISSING_CODES:
                return False
            raise self._wrap(e, 'Checking bucket', bucket) from e
        except BotoCoreError as e:
            raise self._wrap(e, 'Checking bucket', bucket) from e
        return True

    def make_bucket(self, bucket: str):
        try:
            self.s3_client.create_bucket(Bucket=bucket)
        except ClientError as e:
            if error_code(e) in EXISTS_CODES:
                raise AlreadyExists(f"bucket {bucket!r} already exists") from e
            raise self._wrap(e, 'Creating bucket', bucket) from e
        except BotoCoreError as e:
            raise self._wrap(e, 'Creating bucket', bucket) from e

    def remove_bucket(self, bucket: str):
        try:
            self.s3_client.delete_bucket(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Deleting bucket', bucket) from e

    def iter_objects(self, bucket: str, prefix: str, recursive: bool = False) -> Iterator[ObjectInfo]:
        if self.verbose:
            print(f"[List: {bucket}/{prefix}{'' if not recursive else ' (recursive)'}]", file=sys.stderr)

        paginator = self.s3_client.get_paginator('list_objects_v2')
        operation_parameters = {'Bucket': bucket, 'Prefix': prefix}
        if not recursive:
            operation_parameters['Delimiter'] = '/'

        try:
            for page in paginator.paginate(**operation_parameters):
                entries = []
                for obj in page.get('Contents', []):
                    entries.append(ObjectInfo(
                        key=obj['Key'],
                        size=obj.get('Size', 0),
                        last_modified=obj.get('LastModified'),
                    ))
                for cp in page.get('CommonPrefixes', []):
                    entries.append(ObjectInfo(key=cp['Prefix']))
                # keep the key order S3 uses across both result kinds
                entries.sort(key=lambda o: o.key)
                yield from entries
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Listing', bucket, prefix) from e

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Reading', bucket, key) from e

    def put_object(self, bucket: str, key: str, data: bytes = b''):
        try:
            self.s3_client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Writing', bucket, key) from e

    def copy_object(self, bucket: str, src_key: str, dst_key: str):
        try:
            self.s3_client.copy_object(
                Bucket=bucket,
                Key=dst_key,
                CopySource={'Bucket': bucket, 'Key': src_key},
            )
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Copying', bucket, src_key) from e

    def remove_object(self, bucket: str, key: str):
        try:
            self.s3_client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Deleting', bucket, key) from e

    def download_file(self, bucket: str, key: str, local_path: str):
        try:
            self.s3_client.download_file(bucket, key, local_path)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'Downloading', bucket, key) from e

    def upload_file(self, local_path: str, bucket: str, key: str):
        try:
            self.s3_client.upload_file(local_path, bucket, key)
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            raise self._wrap(e, 'Uploading', bucket, key) from e
