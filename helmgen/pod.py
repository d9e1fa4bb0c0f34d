"""Turn a pod specification into a templated spec and the chart values it refers to."""

from __future__ import annotations

import copy
from typing import Any

from helmgen.security_context import (
    process_container_security_context,
    set_nested,
    to_lower_camel,
)

DOMAIN_ENV = "KUBERNETES_CLUSTER_DOMAIN"
DOMAIN_KEY = "kubernetesClusterDomain"

_IMAGE = (
    "{{ .Values.%(obj)s.%(container)s.image.repository }}:"
    "{{ .Values.%(obj)s.%(container)s.image.tag | default .Chart.AppVersion }}"
)
_IMAGE_PULL_POLICY = "{{ .Values.%(obj)s.%(container)s.imagePullPolicy }}"
_ENV_VALUE = "{{ quote .Values.%(obj)s.%(container)s.env.%(key)s }}"
_RESOURCES = "{{- toYaml .Values.%(obj)s.%(container)s.resources | nindent 10 }}"
_ARGS = "{{- toYaml .Values.%(obj)s.%(container)s.args | nindent 8 }}"
_POD_SECURITY_CONTEXT = "{{- toYaml .Values.%(obj)s.podSecurityContext | nindent 8 }}"
_NODE_SELECTOR = "{{- toYaml .Values.%(obj)s.nodeSelector | nindent 8 }}"
_IMAGE_PULL_SECRETS = "{{ .Values.imagePullSecrets | default list | toJson }}"
_DOMAIN_VALUE = "{{ quote .Values.%s }}" % DOMAIN_KEY

_CONTAINER_KEYS = ("containers", "initContainers")


def split_image(image: str) -> tuple[str, str]:
    """Split an image reference into repository and tag (the tag keeps any digest)."""
    index = image.rfind(":")
    if "@" in image and image.count(":") >= 2:
        index = image.rfind(":", 0, index)
    if index < 0:
        raise ValueError(f'wrong image format: "{image}"')
    return image[:index], image[index + 1 :]


def _template_name(app_meta: Any, mapping: dict | None, key: str) -> None:
    if mapping and mapping.get(key):
        mapping[key] = app_meta.templated_name(mapping[key])


def _process_env(obj_name: str, app_meta: Any, container: dict, values: dict) -> None:
    container_name = to_lower_camel(container["name"])
    for env in container.get("env") or []:
        source = env.get("valueFrom")
        if source is not None:
            if source.get("secretKeyRef") is not None:
                _template_name(app_meta, source["secretKeyRef"], "name")
            elif source.get("configMapKeyRef") is not None:
                _template_name(app_meta, source["configMapKeyRef"], "name")
            continue
        key = to_lower_camel(env["name"].lower())
        set_nested(values, env.get("value", ""), obj_name, container_name, "env", key)
        env["value"] = _ENV_VALUE % {"obj": obj_name, "container": container_name, "key": key}


def _process_container(obj_name: str, app_meta: Any, container: dict, values: dict) -> None:
    repository, tag = split_image(container.get("image") or "")
    container_name = to_lower_camel(container["name"])
    fields = {"obj": obj_name, "container": container_name}

    container["image"] = _IMAGE % fields
    set_nested(values, repository, obj_name, container_name, "image", "repository")
    set_nested(values, tag, obj_name, container_name, "image", "tag")

    _process_env(obj_name, app_meta, container, values)

    for source in container.get("envFrom") or []:
        _template_name(app_meta, source.get("secretRef"), "name")
        _template_name(app_meta, source.get("configMapRef"), "name")

    env = container.get("env") or []
    env.append({"name": DOMAIN_ENV, "value": _DOMAIN_VALUE})
    container["env"] = env

    resources = container.get("resources") or {}
    container["resources"] = resources
    for kind in ("requests", "limits"):
        for resource, quantity in (resources.get(kind) or {}).items():
            set_nested(
                values, str(quantity), obj_name, container_name, "resources", kind, resource
            )

    policy = container.get("imagePullPolicy")
    if policy:
        set_nested(values, policy, obj_name, container_name, "imagePullPolicy")
        container["imagePullPolicy"] = _IMAGE_PULL_POLICY % fields


def _template_containers(obj_name: str, containers: list, values: dict) -> None:
    for container in containers:
        container_name = to_lower_camel(container["name"])
        fields = {"obj": obj_name, "container": container_name}

        resources = values.get(obj_name, {}).get(container_name, {}).get("resources")
        if resources:
            container["resources"] = _RESOURCES % fields

        args = container.get("args")
        if args:
            container["args"] = _ARGS % fields
            set_nested(values, list(args), obj_name, container_name, "args")


def process_spec(obj_name: str, app_meta: Any, spec: dict) -> tuple[dict, dict]:
    """Template a pod spec for chart ``obj_name``.

    ``app_meta`` must offer ``templated_name(name)`` and ``config.image_pull_secrets``.
    Returns the templated spec and the values it refers to; ``spec`` itself is not changed.
    """
    spec_map = copy.deepcopy(spec)
    values: dict = {}

    for key in _CONTAINER_KEYS:
        for container in spec_map.get(key) or []:
            _process_container(obj_name, app_meta, container, values)

    for volume in spec_map.get("volumes") or []:
        _template_name(app_meta, volume.get("configMap"), "name")
        _template_name(app_meta, volume.get("secret"), "secretName")
        _template_name(app_meta, volume.get("persistentVolumeClaim"), "claimName")

    _template_name(app_meta, spec_map, "serviceAccountName")

    for pull_secret in spec_map.get("imagePullSecrets") or []:
        _template_name(app_meta, pull_secret, "name")

    for key in _CONTAINER_KEYS:
        containers = spec_map.get(key)
        if containers:
            _template_containers(obj_name, containers, values)

    if app_meta.config.image_pull_secrets and not spec_map.get("imagePullSecrets"):
        spec_map["imagePullSecrets"] = _IMAGE_PULL_SECRETS
        values["imagePullSecrets"] = []

    process_container_security_context(obj_name, spec_map, values)

    pod_security_context = spec_map.get("securityContext")
    if pod_security_context:
        spec_map["securityContext"] = _POD_SECURITY_CONTEXT % {"obj": obj_name}
        set_nested(values, pod_security_context, obj_name, "podSecurityContext")

    node_selector = spec_map.get("nodeSelector")
    if node_selector is not None:
        spec_map["nodeSelector"] = _NODE_SELECTOR % {"obj": obj_name}
        set_nested(values, node_selector, obj_name, "nodeSelector")

    return spec_map, values