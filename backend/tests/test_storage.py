"""Asset URL resolution."""

from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from doccraft.pipeline.context import AssetRef
from doccraft.pipeline.errors import StorageError
from doccraft.storage.assets import LocalAssetStorage, S3AssetStorage

LOGO = AssetRef(name="logo", file="acme/logo.png", uuid="a1")


def test_local_url_is_site_relative():
    storage = LocalAssetStorage(uploads_dir="uploads/")

    assert storage.url(LOGO) == "/uploads/assets/acme/logo.png"


def test_local_asset_without_file():
    with pytest.raises(StorageError):
        LocalAssetStorage().url(AssetRef(name="logo", file=None))


def test_s3_presigns_get_with_ttl():
    client = Mock()
    client.generate_presigned_url.return_value = "https://s3.test/assets/acme/logo.png?sig=1"
    storage = S3AssetStorage(bucket="assets", ttl_seconds=600, client=client)

    assert storage.url(LOGO) == "https://s3.test/assets/acme/logo.png?sig=1"
    client.generate_presigned_url.assert_called_once_with(
        "get_object",
        Params={"Bucket": "assets", "Key": "acme/logo.png"},
        ExpiresIn=600,
    )


def test_s3_client_error_becomes_storage_error():
    client = Mock()
    client.generate_presigned_url.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
    )
    storage = S3AssetStorage(bucket="assets", ttl_seconds=600, client=client)

    with pytest.raises(StorageError, match="logo"):
        storage.url(LOGO)
