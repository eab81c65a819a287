"""Tests for coordinates, records, error formatting and line rendering."""

from __future__ import annotations

import pytest

from kubesweep.errors import (
    ConfigError,
    DiscoveryUnavailable,
    ListFailed,
    MalformedCoordinate,
    SweepError,
    one_line,
)
from kubesweep.models.resources import APIResourceEntry, ObjectRecord, ResourceCoordinate
from kubesweep.output import processing_line, record_lines


class TestResourceCoordinate:
    def test_str_core_group(self) -> None:
        """The core group renders with an empty group before the slash."""
        assert str(ResourceCoordinate("", "v1", "pods")) == "/v1, Resource=pods"

    def test_str_named_group(self) -> None:
        """A named group renders as group/version."""
        assert str(ResourceCoordinate("apps", "v1", "deployments")) == "apps/v1, Resource=deployments"

    def test_group_version(self) -> None:
        """group_version omits the group for the core group."""
        assert ResourceCoordinate("", "v1", "pods").group_version == "v1"
        assert ResourceCoordinate("batch", "v1", "jobs").group_version == "batch/v1"

    def test_equality_is_field_wise(self) -> None:
        """Coordinates compare by group, version and resource."""
        assert ResourceCoordinate("", "v1", "events") == ResourceCoordinate("", "v1", "events")
        assert ResourceCoordinate("", "v1", "events") != ResourceCoordinate("events.k8s.io", "v1", "events")

    def test_immutable(self) -> None:
        """Coordinates are frozen."""
        coordinate = ResourceCoordinate("", "v1", "pods")
        with pytest.raises(AttributeError):
            coordinate.resource = "nodes"  # type: ignore[misc]


class TestAPIResourceEntry:
    def test_supports(self) -> None:
        """supports() checks verb membership."""
        entry = APIResourceEntry("pods", frozenset({"get", "list"}))
        assert entry.supports("list")
        assert not entry.supports("delete")


class TestErrors:
    def test_all_errors_are_sweep_errors(self) -> None:
        """Every error is a SweepError rendering as context: cause."""
        coordinate = ResourceCoordinate("", "v1", "pods")
        for err in (
            ConfigError("no config"),
            DiscoveryUnavailable("down"),
            MalformedCoordinate("a/b/c"),
            ListFailed(coordinate, "forbidden"),
        ):
            assert isinstance(err, SweepError)
            assert str(err) == f"{err.context}: {err.cause}"

    def test_malformed_coordinate_message(self) -> None:
        """MalformedCoordinate names the bad group-version twice."""
        err = MalformedCoordinate("a/b/c")
        assert str(err) == "error parsing GroupVersion a/b/c: unexpected GroupVersion string: 'a/b/c'"

    def test_multi_line_cause_rendered_on_one_line(self) -> None:
        """A multi-line cause is collapsed to one diagnostic line."""
        cause = RuntimeError("(403)\nReason: Forbidden\n\nHTTP response body: {}\n")
        err = ListFailed(ResourceCoordinate("", "v1", "secrets"), cause)
        assert str(err) == "error listing /v1, Resource=secrets: (403); Reason: Forbidden; HTTP response body: {}"
        assert err.cause is cause

    def test_one_line(self) -> None:
        """Join non-blank lines with a semicolon."""
        assert one_line("  first\n\n  second  \n") == "first; second"
        assert one_line("single") == "single"


class TestRendering:
    def test_processing_line(self) -> None:
        """Render the per-kind Processing line."""
        coordinate = ResourceCoordinate("rbac.authorization.k8s.io", "v1", "clusterroles")
        assert processing_line(coordinate) == "Processing rbac.authorization.k8s.io/v1, Resource=clusterroles"

    def test_namespaced_record(self) -> None:
        """Render namespace, name and the trailing blank line."""
        assert record_lines(ObjectRecord("default", "a")) == ["Namespace: default", "Name: a", ""]

    def test_cluster_scoped_record_omits_namespace(self) -> None:
        """Omit the Namespace line for cluster-scoped objects."""
        assert record_lines(ObjectRecord("", "node-1")) == ["Name: node-1", ""]
