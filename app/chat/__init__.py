"""
Chat app for real-time messaging.

This app handles:
- Rooms (group rooms and direct messages) and their membership
- Message sending, history, editing and deletion
- WebSocket real-time updates and typing indicators

Related apps:
    - authentication: User model for creators, participants and senders

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import MessageService, RoomService

    # Create room
    room = RoomService.create_room(creator=user, name="General")

    # Send message
    message = MessageService.send_message(room.id, user, "Hello!")
"""
