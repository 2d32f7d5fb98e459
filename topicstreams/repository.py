from typing import Iterable, Optional, Protocol
from topicstreams.model import Topic, UserData
from topicstreams.streams import StateStream, StreamProducer


class TopicsSource(Protocol):
  def get_topics_stream(self) -> StreamProducer[tuple[Topic, ...]]: ...


class FollowedIdsSource(Protocol):
  def followed_topic_ids_stream(self) -> StreamProducer[frozenset[str]]: ...


class InMemoryTopicsRepository:
  def __init__(self, topics: Optional[Iterable[Topic]] = None) -> None:
    self._topics: StateStream[tuple[Topic, ...]] = StateStream() if topics is None else StateStream(tuple(topics))

  def get_topics_stream(self) -> StreamProducer[tuple[Topic, ...]]: return self._topics
  def get_topic(self, id: str) -> StreamProducer[Optional[Topic]]:
    return self._topics.map(lambda topics: next((topic for topic in topics if topic.id == id), None))

  def send_topics(self, topics: Iterable[Topic]): self._topics.emit(tuple(topics))


class InMemoryUserDataRepository:
  """
  Holds the data of the current user.
  Nothing is emitted until the first update, unless initial user data is given.
  """
  def __init__(self, user_data: Optional[UserData] = None) -> None:
    self._user_data: StateStream[UserData] = StateStream() if user_data is None else StateStream(user_data)
    self._followed_topic_ids = self._user_data.map(lambda data: data.followed_topics)

  @property
  def current_user_data(self) -> UserData: return self._user_data.value if self._user_data.has_value else UserData()

  def user_data_stream(self) -> StreamProducer[UserData]: return self._user_data
  def followed_topic_ids_stream(self) -> StreamProducer[frozenset[str]]: return self._followed_topic_ids

  def set_followed_topic_ids(self, ids: Iterable[str]):
    self._user_data.emit(self.current_user_data.model_copy(update={ "followed_topics": frozenset(ids) }))

  def toggle_followed_topic_id(self, id: str, followed: bool):
    current = self.current_user_data.followed_topics
    self.set_followed_topic_ids(current | { id } if followed else current - { id })
