"""Tests for node identity."""

import dataclasses

import pytest

from cluster_greeter.core.identity import NodeIdentity, identify, local_greeting


class TestIdentify:
    def test_identify_embeds_node_name(self) -> None:
        assert identify(NodeIdentity("node1")) == "Hello from 'node1'"

    def test_identify_is_deterministic(self) -> None:
        identity = NodeIdentity("node2")

        assert identify(identity) == identify(identity)

    def test_local_greeting(self) -> None:
        assert local_greeting() == "Hello World!"


class TestNodeIdentity:
    def test_identity_is_read_only(self) -> None:
        identity = NodeIdentity("node1")

        with pytest.raises(dataclasses.FrozenInstanceError):
            identity.name = "node2"  # type: ignore[misc]

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            NodeIdentity("")

    def test_str_is_name(self) -> None:
        assert str(NodeIdentity("node3")) == "node3"
