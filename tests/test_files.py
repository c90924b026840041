"""Tests for the locked JSON file helpers"""
import json
import threading

import pytest

from git_pj.utils.files import atomic_write_json, lock_path_for, locked_read_json


def test_write_then_read(temp_dir):
    path = temp_dir / "nested" / "doc.json"
    atomic_write_json(path, {"a": [1, 2]})

    assert locked_read_json(path) == {"a": [1, 2]}
    assert lock_path_for(path).exists()
    assert list(path.parent.glob("*.tmp")) == []


def test_overwrite_replaces_whole_document(temp_dir):
    path = temp_dir / "doc.json"
    atomic_write_json(path, {"pad": "x" * 10000})
    atomic_write_json(path, {"who": "small"})

    assert json.loads(path.read_text()) == {"who": "small"}


def test_failed_serialisation_keeps_previous_document(temp_dir):
    path = temp_dir / "doc.json"
    atomic_write_json(path, {"ok": True})

    with pytest.raises(TypeError):
        atomic_write_json(path, {"bad": object()})

    assert locked_read_json(path) == {"ok": True}
    assert list(temp_dir.glob("*.tmp")) == []


def test_concurrent_writers_never_tear_the_file(temp_dir):
    path = temp_dir / "repos.json"
    documents = {
        "large": {"who": "large", "pad": "x" * 200000},
        "small": {"who": "small"},
    }
    errors = []
    reads = []

    def write(name):
        try:
            for _ in range(20):
                atomic_write_json(path, documents[name])
        except Exception as e:  # collected and asserted below
            errors.append(e)

    def read():
        try:
            for _ in range(40):
                if path.exists():
                    reads.append(locked_read_json(path)["who"])
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=write, args=(name,)) for name in documents]
    threads.append(threading.Thread(target=read))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert json.loads(path.read_text()) in documents.values()
    assert set(reads) <= set(documents)
    assert list(temp_dir.glob("*.tmp")) == []
