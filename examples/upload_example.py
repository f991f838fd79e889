#!/usr/bin/env python3
"""
OBS Python SDK - Upload Example

This example shows how requests are signed and, when OBS_AK, OBS_SK and
OBS_ENDPOINT are set, uploads an object and a local file with retries.
"""

import asyncio
import os
import sys
import tempfile
from datetime import datetime, timezone

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from obs_sdk import (
    Credentials,
    CredentialStore,
    RequestSigner,
    SigningContext,
    HttpMethod,
    OBSClient,
    OBSConfiguration,
    UploadObjectRequest,
    UploadFileRequest,
    ObjectACL,
    OBSError,
    md5_base64,
)


def signing_example():
    """Demonstrate signing a request without sending it"""
    print("=== Request Signing Example ===")

    store = CredentialStore(Credentials.permanent("EXAMPLEAK", "example-secret-key"))
    signer = RequestSigner(store)

    body = b"Hello, OBS!"
    context = SigningContext(
        method=HttpMethod.PUT,
        url="https://example-bucket.obs.cn-north-4.myhuaweicloud.com/greetings/hello.txt?acl",
        bucket_name="example-bucket",
        object_key="greetings/hello.txt",
        date=datetime.now(timezone.utc),
        content_type="text/plain",
        content_md5=md5_base64(body),
        metadata={"author": "example"},
        acl=ObjectACL.PRIVATE,
    )

    signed = signer.sign(context)

    print("String to sign:")
    for line in signed.string_to_sign.split("\n"):
        print(f"   {line}")
    print("\nHeaders:")
    for name, value in signed.headers.items():
        print(f"   {name}: {value}")

    # Temporary credentials add x-obs-security-token to later signatures
    store.replace(Credentials.temporary("TEMPAK", "temp-secret-key", "session-token"))
    refreshed = signer.sign(context)
    print(f"\nAfter refresh: {refreshed.headers['Authorization']}")


async def upload_example():
    """Upload an object and a file using configuration from the environment"""
    print("\n=== Upload Example ===")

    try:
        configuration = OBSConfiguration.from_env()
    except OBSError as e:
        print(f"Skipping uploads: {e}")
        return

    bucket = os.environ.get("OBS_BUCKET", "example-bucket")

    async with OBSClient(configuration) as client:
        try:
            response = await client.upload_object(UploadObjectRequest(
                bucket_name=bucket,
                object_key="examples/hello.txt",
                data=b"Hello, OBS!",
                content_type="text/plain",
            ))
            print(f"Uploaded object: ETag={response.etag}")

            with tempfile.NamedTemporaryFile(suffix=".bin", delete=False) as f:
                f.write(os.urandom(256 * 1024))
                path = f.name
            try:
                response = await client.upload_file(UploadFileRequest(
                    bucket_name=bucket,
                    object_key="examples/random.bin",
                    file_path=path,
                ))
                print(f"Uploaded file: ETag={response.etag}")
            finally:
                os.unlink(path)
        except OBSError as e:
            print(f"Upload failed: {e}")


def main():
    signing_example()
    asyncio.run(upload_example())


if __name__ == "__main__":
    main()
