import pytest

from opsdkutil.project import (
    OperatorType,
    UnknownOperatorTypeError,
    append_content,
    get_project_layout,
    has_project_file,
    plugin_chain_to_operator_type,
    read_config,
    rewrite_file_contents,
    set_go_verbose,
)

FILE_CONTENTS = (
    "LABEL operators.operatorframework.io.bundle.mediatype.v1=registry+v1 \n"
    "LABEL operators.operatorframework.io.bundle.manifests.v1=manifests/ \n"
    "LABEL operators.operatorframework.io.bundle.metadata.v1=metadata/ \n"
    "COPY deploy/olm-catalog/memcached-operator/manifests /manifests/ \n"
)
NEW_LABEL = "LABEL operators.operatorframework.io.bundle.tests.v1=tests/ \n"
EXPECTED = (
    "LABEL operators.operatorframework.io.bundle.mediatype.v1=registry+v1 \n"
    "LABEL operators.operatorframework.io.bundle.manifests.v1=manifests/ \n"
    "LABEL operators.operatorframework.io.bundle.metadata.v1=metadata/ \n"
    "LABEL operators.operatorframework.io.bundle.tests.v1=tests/ \n"
    "COPY deploy/olm-catalog/memcached-operator/manifests /manifests/ \n"
)


def test_append_content_after_last_instruction():
    assert append_content(FILE_CONTENTS, "LABEL", NEW_LABEL) == EXPECTED


def test_append_content_missing_instruction():
    with pytest.raises(ValueError, match="^no prior string ADD in newContent$"):
        append_content(
            FILE_CONTENTS,
            "ADD",
            "ADD operators.operatorframework.io.bundle.tests.v1=tests/ \n",
        )


def test_append_content_without_trailing_newline():
    contents = (
        "LABEL operators.operatorframework.io.bundle.mediatype.v1=registry+v1 \n"
        "LABEL operators.operatorframework.io.bundle.manifests.v1=manifests/ \n"
        "LABEL operators.operatorframework.io.bundle.metadata.v1=metadata/"
    )
    with pytest.raises(ValueError, match="no new line"):
        append_content(contents, "LABEL", NEW_LABEL)


def test_rewrite_file_contents(tmp_path):
    path = tmp_path / "bundle.Dockerfile"
    path.write_text(FILE_CONTENTS)
    rewrite_file_contents(path, "LABEL", NEW_LABEL)
    assert path.read_text() == EXPECTED


def test_rewrite_missing_file(tmp_path):
    with pytest.raises(OSError, match="error in getting contents"):
        rewrite_file_contents(tmp_path / "absent", "LABEL", NEW_LABEL)


@pytest.mark.parametrize(
    "keys, expected",
    [
        (["go.kubebuilder.io/v3"], OperatorType.GO),
        (["helm.sdk.operatorframework.io/v1"], OperatorType.HELM),
        (["ansible.sdk.operatorframework.io/v1"], OperatorType.ANSIBLE),
        (["hybrid.helm.sdk.operatorframework.io/v1-alpha"], OperatorType.HYBRID_HELM),
        (["other/v1", "helm/v1"], OperatorType.HELM),
        ([], OperatorType.UNKNOWN),
    ],
)
def test_plugin_chain_to_operator_type(keys, expected):
    assert plugin_chain_to_operator_type(keys) is expected


def test_operator_type_values():
    assert plugin_chain_to_operator_type(["hybrid"]) == "hybridHelm"


def test_unknown_operator_type_messages():
    assert str(UnknownOperatorTypeError()) == "unknown operator type"
    assert str(UnknownOperatorTypeError("java")) == 'unknown operator type "java"'


def test_set_go_verbose_empty():
    env = {}
    set_go_verbose(env)
    assert env == {"GOFLAGS": "-v"}


def test_set_go_verbose_appends():
    env = {"GOFLAGS": "-mod=vendor"}
    set_go_verbose(env)
    assert env["GOFLAGS"] == "-mod=vendor -v"


def test_set_go_verbose_keeps_existing_flag():
    env = {"GOFLAGS": "-mod=vendor -v"}
    set_go_verbose(env)
    assert env["GOFLAGS"] == "-mod=vendor -v"


def test_has_project_file(tmp_path):
    path = tmp_path / "PROJECT"
    assert has_project_file(path) is False
    path.write_text("version: '3'\n")
    assert has_project_file(path) is True


def test_read_config_and_layout(tmp_path):
    path = tmp_path / "PROJECT"
    path.write_text(
        "version: '3'\nlayout:\n- ansible.sdk.operatorframework.io/v1\n"
        "projectName: memcached\n"
    )
    config = read_config(path)
    assert config["projectName"] == "memcached"
    assert get_project_layout(config) == "ansible.sdk.operatorframework.io/v1"
    assert plugin_chain_to_operator_type(config["layout"]) is OperatorType.ANSIBLE


def test_layout_joins_chain():
    config = {"layout": ["go.kubebuilder.io/v3", "manifests/v2"]}
    assert get_project_layout(config) == "go.kubebuilder.io/v3,manifests/v2"


def test_read_config_requires_version(tmp_path):
    path = tmp_path / "PROJECT"
    path.write_text("layout: go.kubebuilder.io/v3\n")
    with pytest.raises(ValueError, match="version"):
        read_config(path)


def test_read_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_config(tmp_path / "PROJECT")