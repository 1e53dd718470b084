# opsdkutil

A library of helpers for Kubernetes operator projects. It covers YAML manifest
files, CustomResourceDefinitions, naming rules, interactive prompts, `PROJECT`
files and operator bundle metadata.

## Installation

```
pip install opsdkutil
```

The test dependencies come with the `test` extra: `pip install opsdkutil[test]`.

## Modules

### `opsdkutil.names`

- `get_display_name(name)` turns snake, chain, camel, dotted or space-separated
  names into a titled display name. For example, `"another-AppOperator_againTwiceThrice More"`
  becomes `"Another App Operator Again Twice Thrice More"`.
- `is_dns1123_label(value)` checks a value against the DNS-1123 label rules:
  lower-case alphanumerics and `-`, at most 63 characters.
- `format_operator_name_dns1123(name)` leaves valid labels unchanged. For any
  other name it replaces each run of non-alphanumeric characters with `-`, strips
  leading and trailing `-` and lower-cases the result.
- `trim_dns1123_label(label)` drops characters from the front of labels longer
  than 63 characters. It then strips any `-` from both ends.

### `opsdkutil.manifests`

- `YAMLScanner(stream)` splits a multi-document YAML stream on `---` lines. The
  stream may be bytes, a string or a file object. Iterating it yields the raw
  bytes of each document that is not blank. `scan()`, `text()` and `bytes()` give
  step-by-step access. More than 100 blank documents in a row raise `RuntimeError`.
- `get_type_meta_from_bytes(data)` returns a `TypeMeta` holding `api_version`
  and `kind`, and derives `group` and `version` from them. It raises `ValueError`
  if the data holds more than one manifest or is not valid YAML.
- `delete_key(obj, key)` removes `key` from a mapping. If the key is not at the
  top level, it removes it from nested mappings and from mappings inside lists.
- `get_object_bytes(obj, marshal)` passes a mapping or dataclass instance to
  `marshal` after removing `status` and `creationTimestamp`.
- `KUBECONFIG_ENV_VAR` and `WATCH_NAMESPACE_ENV_VAR` name the usual environment
  variables.

### `opsdkutil.ownership`

- `RESTMapper` records the `RESTScope` (`NAMESPACE` or `ROOT`) of each group,
  version and kind through `add()`. `scope_for()` looks a scope up and raises
  `NoKindMatchError` for unknown kinds.
- `supports_owner_reference(rest_mapper, owner, dependent, dep_namespace="")`
  returns `True` in two cases:
  - the owner is cluster scoped;
  - both objects are namespaced and in the same namespace.

  The dependent's namespace is `dep_namespace` when given, and otherwise comes
  from its metadata.

### `opsdkutil.crds`

- `get_custom_resource_definitions(crds_dir)` reads every file in a directory
  and returns `(v1_crds, v1beta1_crds)` as parsed mappings.
  - It raises `DuplicateGVKError` if two CRDs define the same custom resource GVK.
  - It raises `ValueError` for an unrecognised CRD version.
- `definitions_for_v1_crds(*crds)` and `definitions_for_v1beta1_crds(*crds)`
  return `DefinitionKey`s for served versions. A v1beta1 CRD that has no
  `versions` list uses its single `version`.
- `gvks_for_v1_crds(*crds)` and `gvks_for_v1beta1_crds(*crds)` return the
  matching `GroupVersionKind`s.
- `compare_kube_aware_version_strings(v1, v2)` and `sort_crd_versions(versions)`
  order versions the Kubernetes way:
  - GA comes before beta, and beta before alpha;
  - higher numbers come first;
  - names that do not look like Kubernetes versions come last, in lexical order.
- `convert_v1beta1_to_v1(crd)` converts a v1beta1 CRD manifest to the
  `apiextensions.k8s.io/v1` form. This moves top-level schema, subresources and
  printer columns into each version and restructures the conversion webhook
  settings.

### `opsdkutil.prompt`

- `get_required_input(msg, stream=None)` prompts until it reads a non-empty
  line.
- `get_optional_input(msg, stream=None)` prompts once.
- `get_string_array(msg, stream=None)` prompts until it reads a comma-separated
  list.

All three read from `sys.stdin` by default and strip spaces and surrounding
quotes. They raise `EOFError` if the input ends before a full line.
`InteractiveLevel` names the interactive-mode preferences.

### `opsdkutil.project`

- `has_project_file(path="PROJECT")` checks whether the project file exists.
- `read_config(path="PROJECT")` loads the project file as YAML and requires a
  `version` field.
- `plugin_chain_to_operator_type(plugin_keys)` maps a plugin chain to an
  `OperatorType`. `get_project_layout(config)` returns the `layout` field as a
  comma-separated string. `UnknownOperatorTypeError` is the error type for
  operator types that are not recognised.
- `set_go_verbose(environ=None)` adds `-v` to `GOFLAGS` unless it is already
  there.
- `append_content(file_contents, target, new_content)` inserts text on the line
  after the last occurrence of `target`. It raises `ValueError` if the target is
  missing or has no newline after it. `rewrite_file_contents(filename, target, new_content)`
  does the same to a file in place.

### `opsdkutil.bundle`

`BundleMetaData` holds the following fields:

- `bundle_dir`, `package_name`, `channels`, `default_channel`
- `base_image`, `build_command`, `pkgmanifest_path`
- `is_score_config_present`, `other_labels`, `verbose`

Its methods:

- `generate_metadata()` writes `bundle.Dockerfile` and `metadata/annotations.yaml`.
- `copy_operator_manifests()` copies `pkgmanifest_path` into `bundle_dir/manifests`.
- `write_scorecard_config(path)` copies a scorecard config to
  `bundle_dir/tests/scorecard/config.yaml`. It first removes any copy of that
  file from `manifests/`.
- `build_bundle_image(tag)` runs `build_command` with `base_image:tag` appended.
  Without a `build_command` it runs `docker build -f bundle.Dockerfile -t base_image:tag .`.
  The command runs in the parent directory of `bundle_dir`, and a failure raises
  `subprocess.CalledProcessError`.

`render_dockerfile(values)`, `render_annotations(values)` and `copy_manifests(src, dest)`
are also available on their own.

### `opsdkutil.version`

Holds the version strings: `VERSION`, `GIT_VERSION`, `GIT_COMMIT`,
`KUBERNETES_VERSION` and `IMAGE_VERSION`.

## Example

```python
from opsdkutil.names import get_display_name, format_operator_name_dns1123
from opsdkutil.crds import sort_crd_versions

get_display_name("app-_operator")          # "App Operator"
format_operator_name_dns1123("QUAY-IO-x")  # "quay-io-x"
sort_crd_versions(["v1alpha1", "v1"])      # ["v1", "v1alpha1"]
```

```python
from opsdkutil.bundle import BundleMetaData

meta = BundleMetaData(
    bundle_dir="bundle",
    package_name="memcached-operator",
    channels="alpha",
    default_channel="alpha",
)
meta.generate_metadata()
```

## What it does not do

This is a library only. It has no command-line tool and runs no operator or
controller. It does not talk to a cluster: ownership checks use the
`RESTMapper` you fill in yourself. `read_config` only loads the `PROJECT` file
and checks that it has a version. It does not validate plugin configuration.
Bundle images are built by running an external command such as `docker`, which
must be installed.