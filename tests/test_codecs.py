"""
Tests for confstore.codecs and confstore.binding modules.

Tests serialization including:
- JSON compact and pretty output
- YAML encode/decode
- CodecGroup first-success fallback
- Codec registry
- Binding decoded data to dataclasses and typed containers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from confstore.binding import from_builtin, to_builtin
from confstore.codecs import (
    CodecGroup,
    JsonCodec,
    YamlCodec,
    available_codecs,
    get_codec,
    register_codec,
)
from confstore.exceptions import CodecError, ConfigError


@dataclass
class Sample:
    name: str


@dataclass
class Database:
    host: str
    port: int = 5432


@dataclass
class AppSettings:
    name: str
    debug: bool = False
    ratio: float = 1.0
    tags: list[str] = field(default_factory=list)
    database: Database | None = None


@dataclass
class Listener:
    port: int

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")


class RecordingCodec:
    """Codec double that fails or succeeds on demand and records calls."""

    def __init__(self, result: Any = None, fail: bool = False) -> None:
        self.result = result
        self.fail = fail
        self.calls = 0

    def marshal(self, value: Any) -> bytes:
        self.calls += 1
        if self.fail:
            raise CodecError("rejected")
        return self.result

    def unmarshal(self, data: bytes, target_type: Any = None) -> Any:
        self.calls += 1
        if self.fail:
            raise CodecError("rejected")
        return self.result


class TestJsonCodec:
    """Tests for JsonCodec."""

    def test_compact_output_by_default(self):
        """Test that the default output has no whitespace."""
        assert JsonCodec().marshal({"name": "bob"}) == b'{"name":"bob"}'

    def test_pretty_output_two_space_indent(self):
        """Test that indent=2 produces two-space pretty printing."""
        out = JsonCodec(indent=2).marshal({"name": "bob"})
        assert out == b'{\n  "name": "bob"\n}'

    def test_sort_keys(self):
        """Test that sort_keys orders object keys."""
        assert JsonCodec(sort_keys=True).marshal({"b": 1, "a": 2}) == b'{"a":2,"b":1}'

    def test_unmarshal_plain(self):
        """Test decoding without a target type returns plain data."""
        assert JsonCodec().unmarshal(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_unmarshal_into_dataclass(self):
        """Test decoding into a dataclass."""
        got = JsonCodec().unmarshal(b'{"name": "alice"}', Sample)
        assert got == Sample(name="alice")

    def test_round_trip_dataclass(self, sample_config_data):
        """Test that encoded dataclasses decode back equal."""
        codec = JsonCodec(indent=2)
        value = from_builtin(sample_config_data, AppSettings)
        assert codec.unmarshal(codec.marshal(value), AppSettings) == value

    def test_non_ascii_kept_as_utf8(self):
        """Test that non-ASCII text is written as UTF-8, not escaped."""
        assert JsonCodec().marshal({"city": "Zürich"}) == '{"city":"Zürich"}'.encode()

    def test_malformed_json_raises(self):
        """Test that malformed JSON raises CodecError."""
        with pytest.raises(CodecError, match="json decode failed"):
            JsonCodec().unmarshal(b"{not json")

    def test_invalid_utf8_raises(self):
        """Test that non-UTF-8 payloads raise CodecError."""
        with pytest.raises(CodecError, match="not UTF-8"):
            JsonCodec().unmarshal(b"\xff\xfe{}")

    def test_unencodable_value_raises(self):
        """Test that values JSON can't represent raise CodecError."""
        with pytest.raises(CodecError, match="json encode failed"):
            JsonCodec().marshal({"when": object()})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_rejected(self, value):
        """Test that NaN and infinities are not written as invalid JSON."""
        with pytest.raises(CodecError, match="json encode failed"):
            JsonCodec().marshal({"ratio": value})


class TestYamlCodec:
    """Tests for YamlCodec."""

    def test_unmarshal_into_dataclass(self):
        """Test decoding YAML into a nested dataclass."""
        data = b"name: billing\ndatabase:\n  host: db\n"
        got = YamlCodec().unmarshal(data, AppSettings)
        assert got.database == Database(host="db", port=5432)

    def test_round_trip(self, sample_config_data):
        """Test that YAML output decodes back equal."""
        codec = YamlCodec()
        assert codec.unmarshal(codec.marshal(sample_config_data)) == sample_config_data

    def test_keeps_key_order(self):
        """Test that keys are written in insertion order."""
        assert YamlCodec().marshal({"b": 1, "a": 2}) == b"b: 1\na: 2\n"

    def test_malformed_yaml_raises(self):
        """Test that malformed YAML raises CodecError."""
        with pytest.raises(CodecError, match="yaml decode failed"):
            YamlCodec().unmarshal(b"key: [unclosed")

    def test_python_tags_rejected(self):
        """Test that the safe loader refuses arbitrary Python objects."""
        with pytest.raises(CodecError):
            YamlCodec().unmarshal(b"!!python/object/apply:os.system ['true']")

    def test_unencodable_value_raises(self):
        """Test that values the safe dumper can't represent raise CodecError."""
        with pytest.raises(CodecError, match="yaml encode failed"):
            YamlCodec().marshal({"when": object()})


class TestCodecGroup:
    """Tests for CodecGroup fallback."""

    def test_unmarshal_falls_back_to_second(self):
        """Test that B's result is returned when A fails."""
        a = RecordingCodec(fail=True)
        b = RecordingCodec(result={"from": "b"})
        assert CodecGroup(a, b).unmarshal(b"...") == {"from": "b"}
        assert a.calls == 1 and b.calls == 1

    def test_unmarshal_first_success_wins(self):
        """Test that later codecs are not tried after a success."""
        a = RecordingCodec(result={"from": "a"})
        b = RecordingCodec(result={"from": "b"})
        assert CodecGroup(a, b).unmarshal(b"...") == {"from": "a"}
        assert b.calls == 0

    def test_unmarshal_all_fail(self):
        """Test that the group fails only when every codec fails."""
        group = CodecGroup(RecordingCodec(fail=True), RecordingCodec(fail=True))
        with pytest.raises(CodecError, match="no codec in the group could decode"):
            group.unmarshal(b"...")

    def test_marshal_first_success_wins(self):
        """Test that marshal returns the first successful encoding."""
        a = RecordingCodec(fail=True)
        b = RecordingCodec(result=b"from-b")
        c = RecordingCodec(result=b"from-c")
        assert CodecGroup(a, b, c).marshal({"x": 1}) == b"from-b"
        assert c.calls == 0

    def test_marshal_all_fail(self):
        """Test that marshal fails when every codec fails."""
        with pytest.raises(CodecError, match="no codec in the group could encode"):
            CodecGroup(RecordingCodec(fail=True)).marshal({"x": 1})

    def test_empty_group_fails(self):
        """Test that an empty group always fails."""
        with pytest.raises(CodecError):
            CodecGroup().unmarshal(b"{}")

    def test_json_then_yaml_autodetect(self):
        """Test the usual JSON-then-YAML ordering on both formats."""
        group = CodecGroup(JsonCodec(), YamlCodec())
        assert group.unmarshal(b'{"name": "j"}', Sample) == Sample(name="j")
        assert group.unmarshal(b"name: y\n", Sample) == Sample(name="y")

    def test_type_mismatch_falls_through(self):
        """Test that a binding failure counts as a codec failure."""
        group = CodecGroup(JsonCodec(), YamlCodec())
        with pytest.raises(CodecError):
            group.unmarshal(b'{"name": 42}', Sample)

    def test_error_does_not_name_codec(self):
        """Test that the group error hides which codec rejected the value."""
        group = CodecGroup(JsonCodec(), YamlCodec())
        with pytest.raises(CodecError) as excinfo:
            group.unmarshal(b"key: [unclosed")
        assert "json" not in str(excinfo.value).lower()
        assert "yaml" not in str(excinfo.value).lower()


class TestCodecRegistry:
    """Tests for codec registration and lookup."""

    def test_builtin_codecs_registered(self):
        """Test that json and yaml are available by name."""
        assert isinstance(get_codec("json"), JsonCodec)
        assert isinstance(get_codec("YAML"), YamlCodec)
        assert {"json", "yaml"} <= set(available_codecs())

    def test_unknown_codec_raises(self):
        """Test that unknown names raise ConfigError listing the options."""
        with pytest.raises(ConfigError, match="Unknown codec: 'toml'"):
            get_codec("toml")

    def test_register_custom_codec(self):
        """Test registering a custom codec factory."""
        register_codec("pretty_json", lambda: JsonCodec(indent=2))
        assert get_codec("pretty_json").marshal({"a": 1}) == b'{\n  "a": 1\n}'


class TestBinding:
    """Tests for from_builtin and to_builtin."""

    def test_no_target_returns_data(self):
        """Test that None and Any leave data unchanged."""
        data = {"a": [1, 2]}
        assert from_builtin(data) is data
        assert from_builtin(data, Any) is data

    def test_nested_dataclass(self, sample_config_data):
        """Test binding a nested structure."""
        got = from_builtin(sample_config_data, AppSettings)
        assert got.tags == ["eu", "prod"]
        assert got.database == Database(host="db.internal", port=6432)

    def test_defaults_and_unknown_keys(self):
        """Test that defaults fill gaps and unknown keys are ignored."""
        got = from_builtin({"name": "x", "extra": 1}, AppSettings)
        assert got == AppSettings(name="x")

    def test_missing_required_field(self):
        """Test that a missing required field raises CodecError."""
        with pytest.raises(CodecError, match="missing required field 'name'"):
            from_builtin({"debug": True}, AppSettings)

    def test_wrong_primitive_type(self):
        """Test strict primitive checking with a useful location."""
        with pytest.raises(CodecError, match=r"\$\.database\.port: expected int"):
            from_builtin({"name": "x", "database": {"host": "h", "port": "80"}}, AppSettings)

    def test_bool_is_not_int(self):
        """Test that booleans are rejected where ints are expected."""
        with pytest.raises(CodecError, match="expected int, got bool"):
            from_builtin(True, int)

    def test_int_accepted_as_float(self):
        """Test that ints widen to floats."""
        got = from_builtin({"name": "x", "ratio": 2}, AppSettings)
        assert got.ratio == 2.0 and isinstance(got.ratio, float)

    def test_optional_none(self):
        """Test that None is accepted for optional fields."""
        assert from_builtin({"name": "x", "database": None}, AppSettings).database is None

    def test_post_init_error_becomes_codec_error(self):
        """Test that a dataclass rejecting its values raises CodecError."""
        message = r"\$: cannot build Listener: port out of range"
        with pytest.raises(CodecError, match=message) as excinfo:
            from_builtin({"port": 70000}, Listener)
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_post_init_error_falls_through_group(self):
        """Test that a rejected dataclass lets the next codec in a group try."""
        fallback = RecordingCodec(result=Listener(port=8080))
        group = CodecGroup(JsonCodec(), fallback)
        assert group.unmarshal(b'{"port": 0}', Listener) == Listener(port=8080)
        assert fallback.calls == 1

    def test_mapping_required_for_dataclass(self):
        """Test that a list can't become a dataclass."""
        with pytest.raises(CodecError, match="expected a mapping for Sample"):
            from_builtin(["bob"], Sample)

    def test_typed_containers(self):
        """Test dict, list and tuple generics."""
        assert from_builtin({"a": {"name": "x"}}, dict[str, Sample]) == {"a": Sample("x")}
        assert from_builtin([1, 2], tuple[int, ...]) == (1, 2)
        assert from_builtin(["a", 1], tuple[str, int]) == ("a", 1)
        with pytest.raises(CodecError):
            from_builtin([1, "2"], list[int])

    def test_to_builtin_nested(self):
        """Test converting nested dataclasses to plain data."""
        value = AppSettings(name="x", database=Database(host="h"))
        assert to_builtin(value) == {
            "name": "x",
            "debug": False,
            "ratio": 1.0,
            "tags": [],
            "database": {"host": "h", "port": 5432},
        }
        assert to_builtin([Sample("a"), (Sample("b"),)]) == [
            {"name": "a"},
            [{"name": "b"}],
        ]
