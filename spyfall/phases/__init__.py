"""
Phase handlers for question rounds, accusations, voting and spy guesses.
"""

from .question_rounds import QuestionRoundsHandler
from .accusation import AccusationHandler
from .voting import VotingHandler
from .spy_guess import SpyGuessHandler, SpyGuessResult
from .reactions import ReactionsHandler

__all__ = [
    'QuestionRoundsHandler',
    'AccusationHandler',
    'VotingHandler',
    'SpyGuessHandler',
    'SpyGuessResult',
    'ReactionsHandler',
]
