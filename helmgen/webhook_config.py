"""Mutating and validating admission webhook configurations rendered as chart templates.

``app_meta`` follows the same interface as in :mod:`helmgen.webhook_cert`.
"""

from __future__ import annotations

import copy
from typing import Any

from helmgen.webhook_cert import (
    RELEASE_NAMESPACE,
    RenderedTemplate,
    _group_version_kind,
    _object_name,
    _with_webhook_option,
)
from helmgen.yamlfmt import marshal

_GROUP = "admissionregistration.k8s.io"
_INJECT_CA_ANNOTATION = "cert-manager.io/inject-ca-from"
_MUTATING_KIND = "MutatingWebhookConfiguration"
_VALIDATING_KIND = "ValidatingWebhookConfiguration"

_TEMPLATE = """apiVersion: admissionregistration.k8s.io/v1
kind: %(kind)s
metadata:
  name: {{ include "%(chart)s.fullname" . }}-%(name)s
  annotations:
    cert-manager.io/inject-ca-from: {{ .Release.Namespace }}/{{ include "%(chart)s.fullname" . }}-%(cert)s
  labels:
  {{- include "%(chart)s.labels" . | nindent 4 }}
webhooks:
%(webhooks)s"""


def _process_webhook_config(
    app_meta: Any, obj: dict, kind: str, wrapped_kind: str
) -> RenderedTemplate | None:
    """Render a webhook configuration of ``kind``, or return None for other kinds.

    ``wrapped_kind`` is the kind written when the template is wrapped in the
    webhook toggle.
    """
    if _group_version_kind(obj) != (_GROUP, "v1", kind):
        return None
    name = app_meta.trim_name(_object_name(obj))

    webhooks = copy.deepcopy(obj.get("webhooks") or [])
    if not isinstance(webhooks, list):
        raise ValueError(f"unable to cast to {kind}: webhooks is not a list")
    for webhook in webhooks:
        service = (webhook.get("clientConfig") or {}).get("service")
        if not service:
            continue
        service["name"] = app_meta.templated_name(service.get("name", ""))
        namespace = service.get("namespace", "")
        service["namespace"] = namespace.replace(app_meta.namespace, RELEASE_NAMESPACE)

    annotations = (obj.get("metadata") or {}).get("annotations") or {}
    cert_name = annotations.get(_INJECT_CA_ANNOTATION, "")
    if not isinstance(cert_name, str):
        raise ValueError("unable get webhook certName: annotation is not a string")
    cert_name = cert_name.removeprefix(app_meta.namespace + "/")
    cert_name = app_meta.trim_name(cert_name)

    template = _with_webhook_option(app_meta, _TEMPLATE, {})
    written_kind = wrapped_kind if template is not _TEMPLATE else kind
    data = template % {
        "kind": written_kind,
        "chart": app_meta.chart_name,
        "name": name,
        "cert": cert_name,
        "webhooks": marshal(webhooks, 0),
    }
    return RenderedTemplate(name=name, data=data)


class MutatingWebhookProcessor:
    """Renders ``MutatingWebhookConfiguration`` objects."""

    def process(self, app_meta: Any, obj: dict) -> RenderedTemplate | None:
        """Return the rendered template, or None when ``obj`` is of another kind."""
        return _process_webhook_config(app_meta, obj, _MUTATING_KIND, _MUTATING_KIND)


class ValidatingWebhookProcessor:
    """Renders ``ValidatingWebhookConfiguration`` objects."""

    def process(self, app_meta: Any, obj: dict) -> RenderedTemplate | None:
        """Return the rendered template, or None when ``obj`` is of another kind."""
        return _process_webhook_config(app_meta, obj, _VALIDATING_KIND, _MUTATING_KIND)