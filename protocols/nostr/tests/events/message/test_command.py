"""
Tests for group message commands.
"""
import pytest

from core.errors import InvalidInputError
from protocols.nostr.events.message.commands import (
    create_emergency_group_message,
    create_group_message,
)
from protocols.nostr.kinds import Kind


class TestGroupMessageCommands:
    """Test create_group_message and create_emergency_group_message."""

    def setup_method(self):
        self.sender = "a" * 64
        self.members = ["b" * 64, "c" * 64]
        self.channel_id = "d" * 64

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_default_tags(self, clock):
        """Test channel reference, member tags and markers in order."""
        event = create_group_message("hi all", self.channel_id, self.sender, self.members, clock=clock)

        assert event.kind == Kind.CHANNEL_MESSAGE
        assert event.content == "hi all"
        assert [list(tag) for tag in event.tags] == [
            ['e', self.channel_id],
            ['p', self.members[0]],
            ['p', self.members[1]],
            ['peer-group', 'true'],
            ['group-type', 'peer'],
            ['privacy-level', 'giftwrapped'],
            ['priority', 'normal'],
        ]

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_optional_markers(self, clock):
        event = create_group_message(
            "allowance request", self.channel_id, self.sender, self.members,
            {
                'group_type': 'family',
                'priority': 'high',
                'privacy_level': 'encrypted',
                'requires_guardian_approval': True,
                'emergency_level': 'medium',
                'family_id': 'fam-1',
            },
            clock=clock,
        )
        assert [list(tag) for tag in event.tags[3:]] == [
            ['family-group', 'true'],
            ['group-type', 'family'],
            ['privacy-level', 'encrypted'],
            ['priority', 'high'],
            ['guardian-approval', 'required'],
            ['emergency', 'medium'],
            ['family-context', 'fam-1'],
        ]

    @pytest.mark.unit
    def test_channel_id_required(self, clock):
        with pytest.raises(InvalidInputError):
            create_group_message("hi", "", self.sender, self.members, clock=clock)

    @pytest.mark.unit
    def test_members_must_be_pubkeys(self, clock):
        with pytest.raises(InvalidInputError):
            create_group_message("hi", self.channel_id, self.sender, "b" * 64, clock=clock)

    @pytest.mark.unit
    @pytest.mark.event_type
    def test_emergency_message(self, clock):
        """Test emergency broadcasts are critical and need guardian approval."""
        event = create_emergency_group_message(
            "need help", self.channel_id, self.sender, self.members, 'medical', 'fam-1', clock=clock
        )
        assert event.kind == Kind.CHANNEL_MESSAGE
        assert [list(tag) for tag in event.tags[3:]] == [
            ['family-group', 'true'],
            ['group-type', 'family'],
            ['emergency', 'medical'],
            ['priority', 'critical'],
            ['guardian-approval', 'required'],
            ['broadcast', 'true'],
            ['family-context', 'fam-1'],
        ]

    @pytest.mark.unit
    def test_emergency_requires_type(self, clock):
        with pytest.raises(InvalidInputError):
            create_emergency_group_message("x", self.channel_id, self.sender, self.members, '', 'fam-1',
                                           clock=clock)

