import unittest

from topicstreams.model import Topic, UserData
from topicstreams.repository import InMemoryTopicsRepository, InMemoryUserDataRepository
from tests.shared import TEST_TOPICS, async_timeout, settle


class TestTopicsRepository(unittest.IsolatedAsyncioTestCase):
  @async_timeout(1)
  async def test_send_topics(self):
    repository = InMemoryTopicsRepository()
    repository.send_topics(TEST_TOPICS)
    self.assertEqual(await repository.get_topics_stream().first(), TEST_TOPICS)

  @async_timeout(1)
  async def test_initial_topics(self):
    repository = InMemoryTopicsRepository(TEST_TOPICS[:1])
    self.assertEqual(await repository.get_topics_stream().first(), TEST_TOPICS[:1])

  @async_timeout(1)
  async def test_get_topic(self):
    repository = InMemoryTopicsRepository(TEST_TOPICS)
    self.assertEqual(await repository.get_topic("2").first(), TEST_TOPICS[1])
    self.assertIsNone(await repository.get_topic("4").first())

  @async_timeout(1)
  async def test_get_topic_follows_updates(self):
    repository = InMemoryTopicsRepository(TEST_TOPICS)
    renamed = Topic(id="2", name="Android Studio & Tools")
    async with repository.get_topic("2").subscribe() as consumer:
      self.assertEqual(await consumer.get(), TEST_TOPICS[1])
      repository.send_topics([ renamed ])
      self.assertEqual(await consumer.get(), renamed)
      repository.send_topics([])
      self.assertIsNone(await consumer.get())


class TestUserDataRepository(unittest.IsolatedAsyncioTestCase):
  @async_timeout(1)
  async def test_no_emission_before_first_update(self):
    repository = InMemoryUserDataRepository()
    async with repository.followed_topic_ids_stream().subscribe() as consumer:
      await settle()
      self.assertTrue(consumer.empty())
      repository.set_followed_topic_ids([ "1", "3" ])
      self.assertEqual(await consumer.get(), frozenset({ "1", "3" }))

  @async_timeout(1)
  async def test_initial_user_data(self):
    repository = InMemoryUserDataRepository(UserData(followed_topics=frozenset({ "2" })))
    self.assertEqual(await repository.user_data_stream().first(), UserData(followed_topics=frozenset({ "2" })))
    self.assertEqual(await repository.followed_topic_ids_stream().first(), frozenset({ "2" }))

  @async_timeout(1)
  async def test_toggle_followed_topic_id(self):
    repository = InMemoryUserDataRepository()
    self.assertEqual(repository.current_user_data, UserData())
    repository.toggle_followed_topic_id("1", True)
    repository.toggle_followed_topic_id("2", True)
    repository.toggle_followed_topic_id("1", False)
    repository.toggle_followed_topic_id("3", False)
    self.assertEqual(repository.current_user_data.followed_topics, frozenset({ "2" }))
    self.assertEqual(await repository.followed_topic_ids_stream().first(), frozenset({ "2" }))


if __name__ == '__main__':
  unittest.main()
