"""
Example: ship loguru records to CloudWatch Logs.

Needs AWS credentials in the usual boto3 places and:
    CLOUDWATCH_WRITER_LOG_GROUP_NAME=my-group
    CLOUDWATCH_WRITER_LOG_STREAM_NAME=my-stream
"""

import time

from loguru import logger

from cloudwatch_writer import CloudWatchWriter


def main():
    writer = CloudWatchWriter.from_settings()
    # serialize=True sends one JSON document per record
    handler_id = logger.add(writer, serialize=True, level="INFO")

    for i in range(20):
        logger.info(f"tick {i}")
        time.sleep(0.1)

    logger.remove(handler_id)
    writer.close()  # blocks until every record above was sent
    print(f"Done, shipped to {writer.log_group_name}/{writer.log_stream_name}")


if __name__ == "__main__":
    main()
