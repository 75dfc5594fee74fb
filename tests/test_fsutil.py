from dasnode.fsutil import exists


def test_existing_directory(tmp_path):
    assert exists(tmp_path) is True


def test_existing_file(tmp_path):
    file = tmp_path / "file"
    file.write_text("data")
    assert exists(file) is True
    assert exists(str(file)) is True


def test_missing_path(tmp_path):
    assert exists(tmp_path / "missing") is False


def test_removed_file(tmp_path):
    file = tmp_path / "file"
    file.write_text("data")
    file.unlink()
    assert exists(file) is False