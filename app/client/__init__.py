from .poller import PollingError, StatusPoller
from .session import TutorialSession, View
from .sync import MediaPlayer, PlaybackSynchronizer

__all__ = ['MediaPlayer', 'PlaybackSynchronizer', 'PollingError', 'StatusPoller', 'TutorialSession', 'View']
