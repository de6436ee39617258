import dataclasses

import pytest
import yaml

from anchorflow.config import (Config, expand_value, load_config, save_config,
                               validate_config)
from anchorflow.exceptions import MissingFileError


def test_loads_key_value_pairs(write_file):
    path = write_file("run.conf", "anchor=a.bed\noutDirectory=/out\n")
    config = load_config(path)
    assert config["anchor"] == "a.bed"
    assert config.out_directory == "/out"
    assert config.source == path


def test_unset_options_read_as_defaults(write_file):
    config = load_config(write_file("run.conf", "anchor=a.bed\n"))
    assert config["assembly"] == "hg19"
    assert config["tracks"] == "n"
    assert config["window"] == ""
    assert config["matrices"] == ""


def test_value_split_on_first_equals_only(write_file):
    config = load_config(write_file("run.conf", "colours=red=1,blue=2\n"))
    assert config["colours"] == "red=1,blue=2"


def test_escaped_equals_belongs_to_key(write_file):
    config = load_config(write_file("run.conf", "a\\=b=c\n"))
    assert config["a=b"] == "c"


def test_last_assignment_wins(write_file):
    config = load_config(write_file("run.conf", "window=100\nwindow=500\n"))
    assert config["window"] == "500"


def test_whitespace_in_values_is_preserved(write_file):
    config = load_config(write_file("run.conf", "zoom= 5 \n"))
    assert config["zoom"] == " 5 "


def test_comments_blank_and_free_text_lines_ignored(write_file):
    content = "# anchor=commented.bed\n\nthis line is free text\nanchor=a.bed\n"
    config = load_config(write_file("run.conf", content))
    assert config["anchor"] == "a.bed"
    assert config.unknown_keys() == []


def test_module_load_lines_are_collected_not_stored(write_file):
    content = "module load bedtools/2.30.0 R\nanchor=a.bed\nmodule load python/3.9\n"
    config = load_config(write_file("run.conf", content))
    assert config.modules == ("bedtools/2.30.0", "R", "python/3.9")
    assert all("module" not in key for key in config.entries)


def test_module_load_rejects_shell_syntax(write_file):
    content = "module load R;\nmodule load $(whoami)\necho hi && module load R\n"
    config = load_config(write_file("run.conf", content))
    assert config.modules == ()


def test_values_expand_environment_variables(write_file):
    path = write_file("run.conf", "anchor=${DATA}/a.bed\ndb=$DATA/db.txt\n")
    config = load_config(path, environ={"DATA": "/data"})
    assert config["anchor"] == "/data/a.bed"
    assert config["db"] == "/data/db.txt"


def test_values_expand_earlier_options(write_file):
    content = "outDirectory=/out\nmatrices=${outDirectory}/list.txt\n"
    config = load_config(write_file("run.conf", content), environ={})
    assert config["matrices"] == "/out/list.txt"


def test_undefined_variable_expands_to_empty():
    assert expand_value("$NOPE/x", {}, environ={}) == "/x"


def test_escaped_dollar_is_literal():
    assert expand_value("\\$HOME/x", {}, environ={"HOME": "/home/me"}) == "$HOME/x"


def test_leading_tilde_expands_to_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert expand_value("~/data", {}, environ={}) == str(tmp_path / "data")


def test_missing_config_file(tmp_path):
    with pytest.raises(MissingFileError) as excinfo:
        load_config(tmp_path / "missing.conf")
    assert isinstance(excinfo.value, FileNotFoundError)
    assert "missing.conf" in str(excinfo.value)


def test_unknown_keys_are_kept(write_file):
    config = load_config(write_file("run.conf", "custom=1\nanchor=a.bed\n"))
    assert config["custom"] == "1"
    assert config.unknown_keys() == ["custom"]
    assert "custom" in list(config)


def test_reread_keys_match_file(write_file):
    written = {
        "reference": "ref.bed",
        "db": "db.txt",
        "anchor": "a.bed",
        "outDirectory": "/tmp/out",
        "window": "500000",
        "correlationMethod": "pearson",
        "assembly": "",
    }
    content = "".join(f"{key}={value}\n" for key, value in written.items())
    config = load_config(write_file("run.conf", content), environ={})
    for key, value in written.items():
        assert config[key] == value
    assert config.assembly == "hg19"
    assert config.tracks == "n"


def test_config_is_immutable(make_config):
    config = make_config(anchor="a.bed")
    with pytest.raises(TypeError):
        config.entries["anchor"] = "b.bed"
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.modules = ("R",)


def test_replace_returns_a_copy(make_config):
    config = make_config(anchor="a.bed")
    updated = config.replace(anchor="b.bed", tracks="y")
    assert config["anchor"] == "a.bed"
    assert updated["anchor"] == "b.bed"
    assert updated.tracks == "y"
    assert updated.source == config.source


def test_unknown_key_lookup_raises(make_config):
    config = make_config()
    with pytest.raises(KeyError):
        config["nope"]
    assert config.get("nope") is None


def test_save_config_writes_yaml(make_config, tmp_path):
    config = Config(entries={"anchor": "a.bed", "extra": "1"}, modules=("R",))
    output = tmp_path / "snapshot" / "config.yaml"
    save_config(config, output)

    data = yaml.safe_load(output.read_text())
    assert data["options"]["anchor"] == "a.bed"
    assert data["options"]["assembly"] == "hg19"
    assert data["extra"] == {"extra": "1"}
    assert data["modules"] == ["R"]


def test_validate_config_reports_bad_values(make_config):
    config = make_config(window="lots", pValueThreshold="0.05", tracks="yes")
    issues = validate_config(config)
    assert len(issues) == 2
    assert any("window" in issue for issue in issues)
    assert any("tracks" in issue for issue in issues)


def test_validate_config_accepts_defaults(make_config):
    assert validate_config(make_config()) == []


def test_escaped_equals_in_value_is_kept_verbatim(write_file):
    config = load_config(write_file("run.conf", "a\\=b=c\\=d\n"))
    assert config["a=b"] == "c\\=d"


def test_backslash_dollar_in_environment_value_survives():
    assert expand_value("$PATTERN", {}, {"PATTERN": "a\\$b"}) == "a\\$b"
    assert expand_value("${PATTERN}x", {"PATTERN": "\\$1"}, {}) == "\\$1x"


def test_escaped_dollar_next_to_a_reference():
    assert expand_value("\\$$HOME", {}, {"HOME": "/home/me"}) == "$/home/me"


def test_undecodable_config_file(tmp_path):
    path = tmp_path / "run.conf"
    path.write_bytes(b"anchor=a\xff.bed\n")
    with pytest.raises(MissingFileError, match="Configuration file is not readable"):
        load_config(path)
