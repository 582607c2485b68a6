"""Survey storage and per-user dashboard assembly."""

from data.aggregator import build_user_dashboard, get_user_dashboard, score_record
from data.repository import SurveyRecord, SurveyRepository
