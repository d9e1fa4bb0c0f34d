# helmgen

helmgen is a library that turns parts of plain Kubernetes manifests into Helm
chart templates. Fixed settings such as images, environment variables and
security contexts move into a values tree. The manifests then refer to them
through Helm template expressions.

## Installation

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Modules

### `helmgen.yamlfmt`

- `indent(content, n)` puts `n` spaces in front of every line of `content`.
  A negative `n` leaves the text unchanged.
- `marshal(obj, indent)` dumps `obj` as block-style YAML with sorted keys. It
  indents the result by `indent` spaces and strips trailing newlines and
  spaces.

### `helmgen.security_context`

- `process_container_security_context(name_camel, spec_map, values)` walks
  `containers` and `initContainers` in `spec_map`. For each container that
  has a `securityContext`, it copies the context into `values` under
  `<name_camel>.<container>.containerSecurityContext`. It then replaces the
  context in the spec with a `toYaml ... | nindent 10` template expression.
- `to_lower_camel(text)` converts a name to lowerCamelCase. For example,
  `"SomeContainerName"` becomes `"someContainerName"`.
- `set_nested(mapping, value, *args)` stores a copy of `value` at a key path
  and creates mappings along the way. It raises `ValueError` if the path is
  empty or if a key on the path holds something other than a mapping.

### `helmgen.pod`

`process_spec(obj_name, app_meta, spec)` takes a pod spec given as a
dictionary. It returns `(spec_map, values)` and leaves `spec` unchanged. It
does the following:

- Images become `{{ .Values.<obj>.<container>.image.repository }}:{{ ... .tag | default .Chart.AppVersion }}`.
  `split_image(image)` divides an image into repository and tag. A registry
  port stays in the repository, and a digest stays with the tag.
  `split_image` raises `ValueError` for an image without a tag.
- Plain env values move to `<obj>.<container>.env.<name>`. Names of secret
  and config-map references are templated. Every container also gets a
  `KUBERNETES_CLUSTER_DOMAIN` variable that reads `.Values.kubernetesClusterDomain`.
- Resource requests and limits, args and `imagePullPolicy` move into values.
- Container security contexts, the pod `securityContext` and the
  `nodeSelector` move into values.
- Names of config-map, secret and PVC volumes, the service account and image
  pull secrets are passed through `app_meta.templated_name`.
- If `app_meta.config.image_pull_secrets` is true and the spec has no pull
  secrets, the spec gets a templated `imagePullSecrets` entry, and `values`
  gets an empty `imagePullSecrets` list.

### `helmgen.webhook_cert` and `helmgen.webhook_config`

These modules provide four processors:

- `CertificateProcessor` handles cert-manager `Certificate` objects.
- `IssuerProcessor` handles cert-manager `Issuer` objects.
- `MutatingWebhookProcessor` handles `admissionregistration.k8s.io/v1`
  `MutatingWebhookConfiguration` objects.
- `ValidatingWebhookProcessor` handles `ValidatingWebhookConfiguration`
  objects of the same API group.

Each processor has a `process(app_meta, obj)` method, where `obj` is the
manifest as a dictionary. The method returns `None` when the object is of
another kind. Otherwise it returns a `RenderedTemplate`, which has:

- `name`
- `data`, the rendered text
- `values`
- `filename()`, which gives `<name>.yaml`
- `write(writer)`, which writes the text to a text stream

The processors apply these rewrites:

- **Certificate:** DNS names have the namespace replaced by
  `{{ .Release.Namespace }}` and `cluster.local` replaced by
  `{{ .Values.kubernetesClusterDomain }}`. The issuer name is templated.
- **Webhook configurations:** the name and namespace of each service are
  templated. The certificate named in `cert-manager.io/inject-ca-from` is
  referred to through the chart's full name.
- **`config.cert_manager_as_subchart`:** the Certificate and Issuer templates
  carry Helm post-install/post-upgrade hook annotations.
- **`config.add_webhook_option`:** every template is wrapped in
  `{{- if .Values.webhook.enabled }} ... {{- end }}`. Only the Certificate's
  `values` gain `webhook: {enabled: true}`. With this option set, the
  validating processor writes its template with kind
  `MutatingWebhookConfiguration`.

## The `app_meta` object

The functions and processors read chart information from an `app_meta`
object that the caller supplies. It needs these members:

- `trim_name(name)`
- `templated_name(name)`
- `templated_string(text)`
- `namespace`
- `chart_name`
- `config`, with the flags `image_pull_secrets`, `cert_manager_as_subchart`
  and `add_webhook_option`

## Example

```python
import io
from types import SimpleNamespace

import yaml

from helmgen.webhook_cert import IssuerProcessor

app_meta = SimpleNamespace(
    chart_name="my-chart",
    namespace="my-operator-system",
    trim_name=lambda name: name.removeprefix("my-operator-"),
    config=SimpleNamespace(cert_manager_as_subchart=False, add_webhook_option=False),
)

obj = yaml.safe_load("""
apiVersion: cert-manager.io/v1
kind: Issuer
metadata:
  name: my-operator-selfsigned-issuer
spec:
  selfSigned: {}
""")

template = IssuerProcessor().process(app_meta, obj)
out = io.StringIO()
template.write(out)
print(template.filename())   # selfsigned-issuer.yaml
print(out.getvalue())
```

## What it does not do

helmgen is a library only. It has no command-line tool. It does not:

- read manifest files or streams
- build a chart directory, `Chart.yaml` or a merged `values.yaml`
- provide an `app_meta` implementation

Apart from pod specs, it templates only these kinds:

- Certificate
- Issuer
- MutatingWebhookConfiguration
- ValidatingWebhookConfiguration

There are no processors for Deployments, Services, Secrets or other kinds.