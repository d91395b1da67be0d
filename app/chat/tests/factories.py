"""
Factory Boy factories for chat models.

Provides test data generation for:
- Room: Group room with its creator as first participant
- Message: Message posted to a room
- Attachment: Attachment on a message
- Friendship: A user's friend with shared direct-message rooms

Usage:
    from chat.tests.factories import RoomFactory, MessageFactory

    room = RoomFactory(creator=alice, members=[bob])
    message = MessageFactory(room=room, sender=bob)
"""

import factory

from authentication.tests.factories import UserFactory
from chat.models import Attachment, AttachmentKind, Friendship, Message, Room, RoomType


class RoomFactory(factory.django.DjangoModelFactory):
    """
    Factory for Room model.

    The creator is added to participants, matching RoomService.create_room().
    Pass members=[...] to add more participants.

    Examples:
        room = RoomFactory()
        room = RoomFactory(creator=alice, members=[bob, carol])
        dm = RoomFactory(room_type=RoomType.DM, members=[bob])
    """

    class Meta:
        model = Room
        skip_postgeneration_save = True

    name = factory.Sequence(lambda n: f"Room {n}")
    room_type = RoomType.ROOM
    creator = factory.SubFactory(UserFactory)

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        """Add the creator and any extra members as participants."""
        if not create:
            return
        if self.creator is not None:
            self.participants.add(self.creator)
        for user in extracted or []:
            self.participants.add(user)


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    By default the room's creator sends the message.
    """

    class Meta:
        model = Message

    room = factory.SubFactory(RoomFactory)
    sender = factory.LazyAttribute(lambda o: o.room.creator)
    content = factory.Sequence(lambda n: f"Message {n}")


class AttachmentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Attachment

    message = factory.SubFactory(MessageFactory)
    kind = AttachmentKind.FILE
    resource = factory.Sequence(lambda n: f"https://files.example.com/{n}.pdf")


class FriendshipFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Friendship

    user = factory.SubFactory(UserFactory)
    friend = factory.SubFactory(UserFactory)
