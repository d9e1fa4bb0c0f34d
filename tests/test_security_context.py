import pytest

from helmgen.security_context import (
    process_container_security_context,
    set_nested,
    to_lower_camel,
)


def test_empty_spec_map_leaves_values_empty():
    values = {}
    process_container_security_context("someResourceName", {}, values)
    assert values == {}


def test_single_container():
    spec_map = {
        "containers": [
            {"name": "SomeContainerName", "securityContext": {"privileged": True}},
        ]
    }
    values = {}
    process_container_security_context("someResourceName", spec_map, values)
    assert values == {
        "someResourceName": {
            "someContainerName": {
                "containerSecurityContext": {"privileged": True},
            },
        },
    }
    assert spec_map["containers"][0]["securityContext"] == (
        "{{- toYaml .Values.someResourceName.someContainerName."
        "containerSecurityContext | nindent 10 }}"
    )


def test_multiple_containers():
    spec_map = {
        "containers": [
            {"name": "FirstContainer", "securityContext": {"privileged": True}},
            {
                "name": "SecondContainer",
                "securityContext": {"allowPrivilegeEscalation": True},
            },
        ]
    }
    values = {}
    process_container_security_context("someResourceName", spec_map, values)
    assert values == {
        "someResourceName": {
            "firstContainer": {"containerSecurityContext": {"privileged": True}},
            "secondContainer": {
                "containerSecurityContext": {"allowPrivilegeEscalation": True},
            },
        },
    }


def test_single_container_single_value():
    spec_map = {
        "containers": [
            {"name": "someContainer", "securityContext": {"someField": "someValue"}},
        ]
    }
    values = {}
    process_container_security_context("someResource", spec_map, values)
    assert values == {
        "someResource": {
            "someContainer": {
                "containerSecurityContext": {"someField": "someValue"},
            },
        },
    }


def test_init_containers_are_processed():
    spec_map = {
        "initContainers": [
            {"name": "init", "securityContext": {"runAsUser": 1000}},
        ]
    }
    values = {}
    process_container_security_context("app", spec_map, values)
    assert values == {"app": {"init": {"containerSecurityContext": {"runAsUser": 1000}}}}


def test_container_without_security_context_untouched():
    spec_map = {"containers": [{"name": "plain", "image": "x:1"}]}
    values = {}
    process_container_security_context("app", spec_map, values)
    assert values == {}
    assert spec_map == {"containers": [{"name": "plain", "image": "x:1"}]}


def test_null_security_context_is_ignored():
    spec_map = {"containers": [{"name": "c", "securityContext": None}]}
    values = {}
    process_container_security_context("app", spec_map, values)
    assert values == {}
    assert spec_map["containers"][0]["securityContext"] is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("SomeContainerName", "someContainerName"),
        ("FirstContainer", "firstContainer"),
        ("nginx", "nginx"),
        ("nginx-deployment", "nginxDeployment"),
        ("var_one", "varOne"),
        ("ID", "id"),
        ("", ""),
    ],
)
def test_to_lower_camel(text, expected):
    assert to_lower_camel(text) == expected


def test_set_nested_creates_path():
    data = {}
    set_nested(data, "v", "a", "b", "c")
    assert data == {"a": {"b": {"c": "v"}}}


def test_set_nested_keeps_siblings():
    data = {"a": {"x": 1}}
    set_nested(data, 2, "a", "y")
    assert data == {"a": {"x": 1, "y": 2}}


def test_set_nested_copies_value():
    source = {"k": [1]}
    data = {}
    set_nested(data, source, "a")
    source["k"].append(2)
    assert data == {"a": {"k": [1]}}


def test_set_nested_rejects_non_mapping():
    data = {"a": "text"}
    with pytest.raises(ValueError):
        set_nested(data, 1, "a", "b")


def test_set_nested_requires_path():
    with pytest.raises(ValueError):
        set_nested({}, 1)