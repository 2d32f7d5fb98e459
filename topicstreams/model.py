from enum import Enum
from pydantic import BaseModel, ConfigDict


class TopicSortField(str, Enum):
  NONE = "none"
  NAME = "name"


class Topic(BaseModel):
  model_config = ConfigDict(frozen=True)

  id: str
  name: str
  short_description: str = ""
  long_description: str = ""
  url: str = ""
  image_url: str = ""


class FollowableTopic(BaseModel):
  model_config = ConfigDict(frozen=True)

  topic: Topic
  is_followed: bool


class UserData(BaseModel):
  model_config = ConfigDict(frozen=True)

  followed_topics: frozenset[str] = frozenset()
