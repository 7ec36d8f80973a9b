"""
Tests for channel validator.
"""
import dataclasses

import pytest

from protocols.nostr.event import build_event
from protocols.nostr.events.channel.commands import create_group_channel
from protocols.nostr.events.channel.validator import validate
from protocols.nostr.kinds import Kind


class TestChannelValidator:
    """Test channel validation."""

    @pytest.mark.unit
    @pytest.mark.event_type
    @pytest.mark.parametrize("options", [
        {'group_type': 'family', 'family_federation_id': 'fed-42', 'admin_pubkeys': ["a" * 64]},
        {'group_type': 'peer'},
    ])
    def test_created_channels_are_valid(self, clock, options):
        event = create_group_channel({'name': 'Smith Family'}, "a" * 64, options, clock=clock)
        assert validate(event) is True

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_non_json_content_is_invalid(self, clock):
        event = build_event(Kind.CHANNEL_CREATION, "not json", "a" * 64,
                            [['group-type', 'peer'], ['privacy-level', 'standard']], clock=clock)
        assert validate(event) is False

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_deeply_nested_content_is_invalid(self, clock):
        event = build_event(Kind.CHANNEL_CREATION, "[" * 100_000, "a" * 64,
                            [['group-type', 'peer'], ['privacy-level', 'standard']], clock=clock)
        assert validate(event) is False

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_content_without_name(self, clock):
        event = build_event(Kind.CHANNEL_CREATION, '{"about": "x"}', "a" * 64,
                            [['group-type', 'peer'], ['privacy-level', 'standard']], clock=clock)
        assert validate(event) is False

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_unknown_group_type(self, clock):
        event = build_event(Kind.CHANNEL_CREATION, '{"name": "x"}', "a" * 64,
                            [['group-type', 'club'], ['privacy-level', 'standard']], clock=clock)
        assert validate(event) is False

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_bad_id(self, clock):
        event = create_group_channel({'name': 'Co-op'}, "a" * 64, clock=clock)
        assert validate(dataclasses.replace(event, id="0" * 64)) is False
