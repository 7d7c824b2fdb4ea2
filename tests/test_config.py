"""Tests for generator configuration and built-in qstr data loading."""

import json
from pathlib import Path

import pytest

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import (
    STATIC_QSTRS_FILE,
    TRANSLATIONS_FILE,
    UNSORTED_QSTRS_FILE,
    QstrData,
    default_qstr_data,
)
from qstrgen.core.errors import ConfigLoadError, PatternError, compile_pattern


def write_data_dir(
    directory: Path,
    translations: object = None,
    static_qstrs: object = None,
    unsorted_qstrs: object = None,
) -> Path:
    documents = {
        TRANSLATIONS_FILE: {" ": "space"} if translations is None else translations,
        STATIC_QSTRS_FILE: ["", "__dir__"] if static_qstrs is None else static_qstrs,
        UNSORTED_QSTRS_FILE: ["<stdin>"] if unsorted_qstrs is None else unsorted_qstrs,
    }
    for name, content in documents.items():
        (directory / name).write_text(json.dumps(content), encoding="utf-8")
    return directory


class TestBytesIn:
    def test_masks(self) -> None:
        assert BytesIn.ONE.mask == 0xFF
        assert BytesIn.TWO.mask == 0xFFFF


class TestGeneratorConfig:
    def test_defaults(self) -> None:
        config = GeneratorConfig()
        assert config.bytes_in_hash == BytesIn.TWO
        assert config.bytes_in_string == BytesIn.TWO
        assert config.extra_qstrs == ()

    def test_with_qstr_appends_in_order(self) -> None:
        base = GeneratorConfig()
        config = base.with_qstr("first").with_qstr("second")
        assert config.extra_qstrs == ("first", "second")
        assert base.extra_qstrs == ()

    def test_config_is_frozen(self) -> None:
        config = GeneratorConfig()
        with pytest.raises(ValueError):
            config.bytes_in_hash = BytesIn.ONE  # type: ignore[misc]

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "qstrgen.json"
        path.write_text(json.dumps({"bytes_in_hash": 1, "extra_qstrs": ["rust"]}), encoding="utf-8")

        config = GeneratorConfig.from_file(path)
        assert config.bytes_in_hash == BytesIn.ONE
        assert config.bytes_in_string == BytesIn.TWO
        assert config.extra_qstrs == ("rust",)

    def test_from_file_rejects_unknown_width(self, tmp_path: Path) -> None:
        path = tmp_path / "qstrgen.json"
        path.write_text(json.dumps({"bytes_in_hash": 3}), encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="qstrgen.json"):
            GeneratorConfig.from_file(path)

    def test_from_file_rejects_unknown_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "qstrgen.json"
        path.write_text(json.dumps({"hash_width": 1}), encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            GeneratorConfig.from_file(path)

    def test_from_file_rejects_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "qstrgen.json"
        path.write_text("{bytes_in_hash: 1", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            GeneratorConfig.from_file(path)

    def test_from_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            GeneratorConfig.from_file(tmp_path / "missing.json")


class TestQstrData:
    def test_packaged_data(self) -> None:
        data = default_qstr_data()
        assert data.static_qstrs[:3] == ("", "__dir__", "\n")
        assert "<stdin>" in data.unsorted_qstrs
        assert data.ident_translations["<"] == "lt"
        assert data.ident_translations["\n"] == "0x0a"

    def test_packaged_data_is_loaded_once(self) -> None:
        assert default_qstr_data() is default_qstr_data()

    def test_load_from_directory(self, tmp_path: Path) -> None:
        data = QstrData.load(write_data_dir(tmp_path))
        assert data.ident_translations == {" ": "space"}
        assert data.static_qstrs == ("", "__dir__")
        assert data.unsorted_qstrs == ("<stdin>",)

    def test_missing_document(self, tmp_path: Path) -> None:
        write_data_dir(tmp_path)
        (tmp_path / STATIC_QSTRS_FILE).unlink()
        with pytest.raises(ConfigLoadError, match=STATIC_QSTRS_FILE):
            QstrData.load(tmp_path)

    def test_malformed_document(self, tmp_path: Path) -> None:
        write_data_dir(tmp_path)
        (tmp_path / TRANSLATIONS_FILE).write_text("{'<': 'lt'", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match=TRANSLATIONS_FILE):
            QstrData.load(tmp_path)

    def test_multi_character_translation_key(self, tmp_path: Path) -> None:
        write_data_dir(tmp_path, translations={"<<": "shl"})
        with pytest.raises(ConfigLoadError, match="single character"):
            QstrData.load(tmp_path)

    def test_list_of_non_strings(self, tmp_path: Path) -> None:
        write_data_dir(tmp_path, static_qstrs=[1, 2, 3])
        with pytest.raises(ConfigLoadError):
            QstrData.load(tmp_path)

    def test_wrong_document_shape(self, tmp_path: Path) -> None:
        write_data_dir(tmp_path, unsorted_qstrs="<stdin>")
        with pytest.raises(ConfigLoadError):
            QstrData.load(tmp_path)


class TestCompilePattern:
    def test_valid_pattern(self) -> None:
        assert compile_pattern(r"MP_QSTR_([_a-zA-Z0-9]+)").findall("MP_QSTR_a MP_QSTR_b") == ["a", "b"]

    def test_invalid_pattern(self) -> None:
        with pytest.raises(PatternError):
            compile_pattern(r"MP_QSTR_([_a-z")
