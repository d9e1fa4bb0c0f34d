"""cert-manager Certificate and Issuer resources rendered as chart templates.

The ``app_meta`` objects handed to the processors must provide:

* ``trim_name(name)``: the resource name without the application prefix;
* ``templated_name(name)``: the name rewritten as a chart template expression;
* ``templated_string(text)``: ``text`` with the application prefix templated;
* ``namespace`` and ``chart_name``: plain strings;
* ``config.cert_manager_as_subchart`` and ``config.add_webhook_option``: flags.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, TextIO

from helmgen.pod import DOMAIN_KEY
from helmgen.security_context import set_nested
from helmgen.yamlfmt import marshal

WEBHOOK_HEADER = "{{- if .Values.webhook.enabled }}"
WEBHOOK_FOOTER = "{{- end }}"
DEFAULT_DOMAIN = "cluster.local"
RELEASE_NAMESPACE = "{{ .Release.Namespace }}"

_CERT_GVK = ("cert-manager.io", "v1", "Certificate")
_ISSUER_GVK = ("cert-manager.io", "v1", "Issuer")

_CERT = """apiVersion: cert-manager.io/v1
kind: Certificate
metadata:
  name: {{ include "%(chart)s.fullname" . }}-%(name)s
  labels:
  {{- include "%(chart)s.labels" . | nindent 4 }}
spec:
%(spec)s"""

_CERT_WITH_HOOKS = """apiVersion: cert-manager.io/v1
kind: Certificate
metadata:
  name: {{ include "%(chart)s.fullname" . }}-%(name)s
  annotations:
    "helm.sh/hook": post-install,post-upgrade
    "helm.sh/hook-weight": "2"
  labels:
  {{- include "%(chart)s.labels" . | nindent 4 }}
spec:
%(spec)s"""

_ISSUER = """apiVersion: cert-manager.io/v1
kind: Issuer
metadata:
  name: {{ include "%(chart)s.fullname" . }}-%(name)s
  labels:
  {{- include "%(chart)s.labels" . | nindent 4 }}
spec:
%(spec)s"""

_ISSUER_WITH_HOOKS = """apiVersion: cert-manager.io/v1
kind: Issuer
metadata:
  name: {{ include "%(chart)s.fullname" . }}-%(name)s
  annotations:
    "helm.sh/hook": post-install,post-upgrade
    "helm.sh/hook-weight": "1"
  labels:
  {{- include "%(chart)s.labels" . | nindent 4 }}
spec:
%(spec)s"""


@dataclass
class RenderedTemplate:
    """A chart template file together with the values it contributes."""

    name: str
    data: str
    values: dict = field(default_factory=dict)

    def filename(self) -> str:
        return self.name + ".yaml"

    def write(self, writer: TextIO) -> None:
        writer.write(self.data)


def _group_version_kind(obj: dict) -> tuple[str, str, str]:
    group, _, version = str(obj.get("apiVersion", "")).rpartition("/")
    return group, version, str(obj.get("kind", ""))


def _object_name(obj: dict) -> str:
    return (obj.get("metadata") or {}).get("name", "")


def _with_webhook_option(app_meta: Any, template: str, values: dict) -> str:
    if not app_meta.config.add_webhook_option:
        return template
    set_nested(values, True, "webhook", "enabled")
    return f"{WEBHOOK_HEADER}\n{template}\n{WEBHOOK_FOOTER}"


class CertificateProcessor:
    """Renders cert-manager ``Certificate`` objects."""

    def process(self, app_meta: Any, obj: dict) -> RenderedTemplate | None:
        """Return the rendered template, or None when ``obj`` is not a Certificate."""
        if _group_version_kind(obj) != _CERT_GVK:
            return None
        name = app_meta.trim_name(_object_name(obj))
        spec = copy.deepcopy(obj.get("spec") or {})

        dns_names = spec.get("dnsNames") or []
        if not isinstance(dns_names, list):
            raise ValueError("unable get cert dnsNames: spec.dnsNames is not a list")
        processed = []
        for dns in dns_names:
            if not isinstance(dns, str):
                raise ValueError(f"unable get cert dnsNames: {dns!r} is not a string")
            templated = app_meta.templated_string(dns)
            templated = templated.replace(app_meta.namespace, RELEASE_NAMESPACE)
            templated = templated.replace(DEFAULT_DOMAIN, "{{ .Values.%s }}" % DOMAIN_KEY)
            processed.append(templated)
        spec["dnsNames"] = processed

        issuer_ref = spec.get("issuerRef")
        if issuer_ref is not None and not isinstance(issuer_ref, dict):
            raise ValueError("unable get cert issuerRef: spec.issuerRef is not a mapping")
        issuer_name = (issuer_ref or {}).get("name", "")
        if not isinstance(issuer_name, str):
            raise ValueError("unable get cert issuerRef: name is not a string")
        set_nested(spec, app_meta.templated_name(issuer_name), "issuerRef", "name")

        template = _CERT_WITH_HOOKS if app_meta.config.cert_manager_as_subchart else _CERT
        values: dict = {}
        template = _with_webhook_option(app_meta, template, values)
        data = template % {"chart": app_meta.chart_name, "name": name, "spec": marshal(spec, 2)}
        return RenderedTemplate(name=name, data=data, values=values)


class IssuerProcessor:
    """Renders cert-manager ``Issuer`` objects."""

    def process(self, app_meta: Any, obj: dict) -> RenderedTemplate | None:
        """Return the rendered template, or None when ``obj`` is not an Issuer."""
        if _group_version_kind(obj) != _ISSUER_GVK:
            return None
        name = app_meta.trim_name(_object_name(obj))
        spec = marshal(obj.get("spec"), 2)

        template = _ISSUER_WITH_HOOKS if app_meta.config.cert_manager_as_subchart else _ISSUER
        # The issuer's webhook toggle only shapes the template; the value itself
        # is contributed by the certificate.
        template = _with_webhook_option(app_meta, template, {})
        data = template % {"chart": app_meta.chart_name, "name": name, "spec": spec}
        return RenderedTemplate(name=name, data=data)