from topicstreams.errors import StreamClosedError, UpstreamFailure
from topicstreams.model import FollowableTopic, Topic, TopicSortField, UserData
from topicstreams.streams import CombinedStream, MappedStream, StateStream, StreamConsumer, StreamProducer, combine_latest, stream_of
from topicstreams.repository import FollowedIdsSource, InMemoryTopicsRepository, InMemoryUserDataRepository, TopicsSource
from topicstreams.usecase import GetFollowableTopicsStream, followable_topics
