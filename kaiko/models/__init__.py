from .chat import Chat, ChatParticipant, Message
from .friendship import Friendship
from .game import Game, GameSession, GameSessionPlayer
from .user import User

__all__ = [
    "User",
    "Friendship",
    "Game",
    "GameSession",
    "GameSessionPlayer",
    "Chat",
    "ChatParticipant",
    "Message",
]
