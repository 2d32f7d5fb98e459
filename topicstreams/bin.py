from argparse import ArgumentParser
import asyncio
import logging
from pathlib import Path
from pydantic import BaseModel
from topicstreams.env import LOG_LEVEL
from topicstreams.model import Topic, TopicSortField, UserData
from topicstreams.repository import InMemoryTopicsRepository, InMemoryUserDataRepository
from topicstreams.streams import stream_of
from topicstreams.usecase import GetFollowableTopicsStream


class TopicsFile(BaseModel):
  topics: list[Topic]
  followed_topics: frozenset[str] = frozenset()


async def main(args: list[str] | None = None):
  parser = ArgumentParser("topicstreams")
  parser.add_argument("file", type=Path, help="JSON file with the topics and the followed topic ids.")
  parser.add_argument("--sort", "-S", choices=[ field.value for field in TopicSortField ], default=TopicSortField.NONE.value, help="Sort order of the topics.")
  parser.add_argument("--followed", "-F", action="append", help="Followed topic id, replaces the ids from the file. May be repeated.")
  parser.add_argument("--log-level", "-L", help="Log level.", default=LOG_LEVEL())

  args = parser.parse_args(args)

  logging.basicConfig(level=logging._nameToLevel[args.log_level.upper()])

  data = TopicsFile.model_validate_json(args.file.read_text())
  logging.info(f"loaded {len(data.topics)} topics from {args.file}")

  use_case = GetFollowableTopicsStream(InMemoryTopicsRepository(data.topics), InMemoryUserDataRepository(UserData(followed_topics=data.followed_topics)))
  followed_topic_ids_stream = None if args.followed is None else stream_of(frozenset(args.followed))
  result = await use_case(followed_topic_ids_stream, TopicSortField(args.sort)).first()

  for followable in result: print(f"[{'x' if followable.is_followed else ' '}] {followable.topic.id}\t{followable.topic.name}")

def main_cli(args: list[str] | None = None): asyncio.run(main(args))

if __name__ == "__main__": main_cli()
