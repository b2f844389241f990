# run/publish.py
# 命令行发布：python -m run.publish --config config/private_pub.yml --env development /messages/new '{"id": 1}'
import argparse
import json
import sys

from private_pub import ConfigurationError, DataPayload, PrivatePub, ScriptPayload, TransportError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="publish one message to the broker")
    parser.add_argument("channel", help="channel name, e.g. /messages/new")
    parser.add_argument("payload", help="JSON payload; anything that is not JSON is sent as script")
    parser.add_argument("--config", default="config/private_pub.yml", help="YAML config file")
    parser.add_argument("--env", default="development", help="environment section in the config file")
    parser.add_argument("--script", action="store_true", help="always send payload as script (data.eval)")
    return parser.parse_args(argv)


def to_data(raw: str, force_script: bool = False):
    """能解析成 JSON 的按数据发送（包括 JSON 字符串），否则按脚本发送"""
    if force_script:
        return ScriptPayload(raw)
    try:
        return DataPayload(json.loads(raw))
    except ValueError:
        return ScriptPayload(raw)


def main(argv=None) -> int:
    args = parse_args(argv)
    client = PrivatePub()
    try:
        with client:
            client.load_config(args.config, args.env)
            client.config.load_env()
            resp = client.publish_to(args.channel, to_data(args.payload, args.script))
    except (ConfigurationError, TransportError, OSError) as e:
        print(f"[publish] 失败: {e}", file=sys.stderr)
        return 1
    print(f"[publish] {args.channel} -> {resp.status_code}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
