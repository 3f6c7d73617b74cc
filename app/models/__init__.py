from app.models.workspace import Workspace, WorkspaceMember
from .user import User
from .session import Session
from app.models.campaign import Campaign, campaign_publication
from app.models.media_file import MediaFile, publication_media
from app.models.social_account import SocialAccount
from app.models.social_post_log import SocialPostLog
from app.models.publication import Publication
from app.models.scheduled_post import ScheduledPost
from app.models.user_calendar_event import UserCalendarEvent
from app.models.bulk_operation_history import BulkOperationHistory
from app.models.publication_lock import PublicationLock
from app.models.cache_entry import CacheEntry
