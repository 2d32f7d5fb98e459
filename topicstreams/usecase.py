from typing import Container, Iterable, Optional
import functools
import logging
from topicstreams.model import FollowableTopic, Topic, TopicSortField
from topicstreams.repository import FollowedIdsSource, TopicsSource
from topicstreams.streams import StreamProducer, combine_latest


def followable_topics(topics: Iterable[Topic], followed_ids: Container[str], sort_by: TopicSortField = TopicSortField.NONE) -> tuple[FollowableTopic, ...]:
  result = [ FollowableTopic(topic=topic, is_followed=topic.id in followed_ids) for topic in topics ]
  if sort_by == TopicSortField.NAME: result.sort(key=lambda followable: followable.topic.name)
  return tuple(result)


class GetFollowableTopicsStream:
  """
  Combines the topics with the followed topic ids of the current user.
  A different stream of followed ids may be passed in, in which case the user data is not used.
  """
  def __init__(self, topics_repository: TopicsSource, user_data_repository: FollowedIdsSource) -> None:
    self._topics_repository = topics_repository
    self._user_data_repository = user_data_repository

  def __call__(self, followed_topic_ids_stream: Optional[StreamProducer[frozenset[str]]] = None, sort_by: TopicSortField = TopicSortField.NONE) -> StreamProducer[tuple[FollowableTopic, ...]]:
    if followed_topic_ids_stream is None:
      logging.debug("using the followed topic ids of the current user")
      followed_topic_ids_stream = self._user_data_repository.followed_topic_ids_stream()
    return combine_latest(
      self._topics_repository.get_topics_stream(),
      followed_topic_ids_stream,
      functools.partial(followable_topics, sort_by=TopicSortField(sort_by)))
