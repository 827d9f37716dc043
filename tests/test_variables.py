import pytest

from flowable_worker.errors import DecodeError
from flowable_worker.worker.models import HandlerVariable
from flowable_worker.worker.variables import decode_variables, get_var, variables_to_dict


def by_name(variables):
    return {v.name: (v.type, v.value) for v in variables}


def test_object_shape():
    body = '{"variables":{"foo":{"value":"bar","type":"string"},"num":{"value":42,"type":"number"},"plain":7}}'
    vars_ = by_name(decode_variables(body))
    assert vars_ == {
        "foo": ("string", "bar"),
        "num": ("number", 42),
        "plain": ("", 7),
    }


def test_array_shape_with_id_fallback_and_skips():
    body = (
        '{"variables":['
        '{"name":"a","type":"string","value":"x"},'
        '{"id":"b","type":"integer","value":5},'
        '{"type":"string","value":"orphan"},'
        '"not-an-object"'
        ']}'
    )
    vars_ = decode_variables(body)
    assert [v.name for v in vars_] == ["a", "b"]
    assert vars_[1].value == 5


def test_object_and_array_shapes_are_equivalent():
    as_object = '{"variables":{"a":{"type":"string","value":"x"},"b":{"type":"double","value":1.5}}}'
    as_array = '{"variables":[{"name":"b","type":"double","value":1.5},{"name":"a","type":"string","value":"x"}]}'
    assert by_name(decode_variables(as_object)) == by_name(decode_variables(as_array))


@pytest.mark.parametrize("raw", ['"text"', "3", "null", "true"])
def test_other_shapes_become_pseudo_variable(raw):
    vars_ = decode_variables('{"variables": %s}' % raw)
    assert len(vars_) == 1
    assert vars_[0].name == "variables"
    assert vars_[0].type == "json"


def test_missing_variables_key_is_empty():
    assert decode_variables('{"foo":"bar"}') == []


def test_bytes_body_is_accepted():
    assert by_name(decode_variables(b'{"variables":{"x":1}}')) == {"x": ("", 1)}


@pytest.mark.parametrize("body", ['{"variables":', "", "[1, 2]"])
def test_malformed_body_raises(body):
    with pytest.raises(DecodeError):
        decode_variables(body)


@pytest.mark.parametrize("value,expected", [
    ("hello", "hello"),
    (5.0, "5"),
    (5, "5"),
    (3.14, "3.14"),
    (True, "true"),
    (False, "false"),
    ({"k": "v"}, '{"k":"v"}'),
    ([1, 2], "[1,2]"),
    (None, "null"),
])
def test_get_var_formats(value, expected):
    vars_ = [HandlerVariable(name="v", type="any", value=value)]
    assert get_var(vars_, "v") == expected


def test_get_var_first_match_and_missing():
    vars_ = [
        HandlerVariable(name="dup", type="string", value="first"),
        HandlerVariable(name="dup", type="string", value="second"),
    ]
    assert get_var(vars_, "dup") == "first"
    assert get_var(vars_, "nope") == ""


def test_get_var_unencodable_value():
    vars_ = [HandlerVariable(name="o", type="json", value=object())]
    assert get_var(vars_, "o") == ""


def test_variables_to_dict_last_wins():
    vars_ = [
        HandlerVariable(name="dup", value=1),
        HandlerVariable(name="other", value=2),
        HandlerVariable(name="dup", value=3),
    ]
    assert variables_to_dict(vars_) == {"dup": 3, "other": 2}
