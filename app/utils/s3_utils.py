import boto3
import os
from botocore.exceptions import NoCredentialsError


class S3ConfigError(Exception):
    """Bucket or credentials are missing."""


def get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        region_name=os.getenv("AWS_REGION"),
    )


def object_url(key):
    base_url = (os.getenv("S3_BASE_URL") or "").rstrip("/")
    return f"{base_url}/{key}"


def upload_file_to_s3(file, key, bucket_name, content_type=None):
    """Upload a file object as public-read and return its public URL."""
    s3 = get_s3_client()
    extra_args = {"ACL": "public-read"}
    if content_type:
        extra_args["ContentType"] = content_type
    try:
        s3.upload_fileobj(file, bucket_name, key, ExtraArgs=extra_args)
        return object_url(key)

    except NoCredentialsError:
        raise S3ConfigError("AWS credentials not found. Check environment variables.")


def delete_file_from_s3(key, bucket_name):
    s3 = get_s3_client()
    try:
        s3.delete_object(Bucket=bucket_name, Key=key)
        return True

    except NoCredentialsError:
        raise S3ConfigError("AWS credentials not found. Check environment variables.")
