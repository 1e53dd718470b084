import pytest

from opsdkutil.ownership import (
    NoKindMatchError,
    RESTMapper,
    RESTScope,
    supports_owner_reference,
)


@pytest.fixture
def mapper():
    m = RESTMapper()
    m.add("apps", "v1alpha1", "MyNamespaceKind", RESTScope.NAMESPACE)
    m.add("rbac", "v1alpha1", "MyClusterKind", RESTScope.ROOT)
    return m


def _obj(kind, api_version, name, namespace=None):
    metadata = {"name": name}
    if namespace is not None:
        metadata["namespace"] = namespace
    return {"kind": kind, "apiVersion": api_version, "metadata": metadata}


NS = ("MyNamespaceKind", "apps/v1alpha1")
CL = ("MyClusterKind", "rbac/v1alpha1")


@pytest.mark.parametrize(
    "owner, dependent, dep_namespace, expected",
    [
        (
            _obj(*NS, "example-nginx-controller", "ns"),
            _obj(*CL, "example-nginx-role", "ns"),
            "",
            False,
        ),
        (
            _obj(*CL, "example-nginx-controller", "ns"),
            _obj(*CL, "example-nginx-role", "ns"),
            "",
            True,
        ),
        (
            _obj(*NS, "example-nginx-controller", "ns"),
            _obj(*NS, "example-nginx-role", "ns"),
            "",
            True,
        ),
        (
            _obj(*NS, "example-nginx-controller", "ns1"),
            _obj(*NS, "example-nginx-role", "ns"),
            "",
            False,
        ),
        (
            _obj(*NS, "example-nginx-controller", "ns"),
            _obj(*NS, "example-nginx-role"),
            "ns",
            True,
        ),
        (
            _obj(*NS, "example-nginx-controller", "ns"),
            _obj(*NS, "example-nginx-role"),
            "ns1",
            False,
        ),
    ],
    ids=[
        "false when owner namespaced and dependent cluster scoped",
        "true when both cluster scoped",
        "true when both namespaced in same namespace",
        "false when namespaced in different namespaces",
        "true if depNamespace provided and matches",
        "false if depNamespace provided and does not match",
    ],
)
def test_supports_owner_reference(mapper, owner, dependent, dep_namespace, expected):
    assert supports_owner_reference(mapper, owner, dependent, dep_namespace) is expected


def test_invalid_owner_kind(mapper):
    owner = _obj("Dummy", "apps/v1alpha1", "example-nginx-controller", "ns1")
    dependent = _obj(*NS, "example-nginx-role", "ns")
    with pytest.raises(NoKindMatchError, match="Dummy"):
        supports_owner_reference(mapper, owner, dependent, "")


def test_invalid_dependent_kind(mapper):
    owner = _obj(*NS, "example-nginx-controller", "ns1")
    dependent = _obj("Dummy", "apps/v1alpha1", "example-nginx-role", "ns")
    with pytest.raises(NoKindMatchError):
        supports_owner_reference(mapper, owner, dependent, "")


def test_scope_for(mapper):
    assert mapper.scope_for("rbac", "v1alpha1", "MyClusterKind") is RESTScope.ROOT
    with pytest.raises(NoKindMatchError):
        mapper.scope_for("rbac", "v1", "MyClusterKind")