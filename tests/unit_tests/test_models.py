import pytest

from medialibrary.models import MediaRecord


def test_new_record_defaults():
    media = MediaRecord(name="photo", file_name="photo.png")
    assert media.id is None
    assert media.collection_name == "default"
    assert media.custom_properties == {}


@pytest.mark.parametrize(
    ("file_name", "extension"),
    [("photo.PNG", "png"), ("archive.tar.gz", "gz"), ("README", "")],
)
def test_extension(file_name: str, extension: str):
    assert MediaRecord(file_name=file_name).extension == extension


def test_fill_keeps_identity():
    media = MediaRecord(id=5, name="old")
    media.fill({"id": 6, "name": "new", "custom_properties": {"a": 1}})
    assert media.id == 5
    assert media.name == "new"
    assert media.custom_properties == {"a": 1}


def test_fill_validates_values():
    with pytest.raises(ValueError):
        MediaRecord().fill({"size": -1})


def test_custom_headers_are_copied():
    headers = {"ACL": "public-read"}
    media = MediaRecord().set_custom_headers(headers)
    headers["ACL"] = "private"
    assert media.get_custom_headers() == {"ACL": "public-read"}


def test_path_uses_id_and_file_name():
    assert MediaRecord(id=12, file_name="a.png").get_path() == "12/a.png"
