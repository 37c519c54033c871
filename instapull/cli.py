"""
instapull Command-line Interface
================================

Usage:
    instapull resolve https://www.instagram.com/p/ABC123/
    instapull resolve https://www.instagram.com/reel/XYZ789/ --json
    instapull private https://www.instagram.com/someuser/
    instapull serve --port 8877
"""

import argparse
import asyncio
import json
import sys

from .config import Settings
from .log_config import LogConfig
from .privacy import PrivacyChecker
from .resolver import Resolver
from .transport import HttpTransport


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="instapull",
        description="Resolve Instagram post, reel and story URLs into downloadable media",
    )
    parser.add_argument("--env", default=".env", help="Path to .env file (default: .env)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ─── resolve ───────────────────────────────────
    p_resolve = subparsers.add_parser("resolve", help="Resolve post URLs into media")
    p_resolve.add_argument("urls", nargs="+", help="Instagram post/reel/story URLs")
    p_resolve.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    p_resolve.add_argument("-c", "--concurrency", type=int, default=5, help="Parallel URLs")

    # ─── private ───────────────────────────────────
    p_private = subparsers.add_parser("private", help="Privacy pre-check for a profile URL")
    p_private.add_argument("url", help="Instagram profile URL")

    # ─── serve ─────────────────────────────────────
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Bind host")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def pp(post, as_json: bool = False):
    """Pretty-print a CanonicalPost."""
    data = post.to_dict()
    if as_json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return
    if not post.success:
        print(f"  error: {post.error}")
        return
    print(f"  kind: {post.post_kind.value} (via {post.strategy})")
    if post.owner and post.owner.username:
        print(f"  owner: @{post.owner.username}")
    for i, asset in enumerate(post.media, 1):
        quality = f" [{asset.quality_label}]" if asset.quality_label else ""
        print(f"  {i}. {asset.kind.value}{quality} {asset.source_url}")


async def _resolve(settings: Settings, urls, concurrency: int):
    async with HttpTransport(settings) as transport:
        resolver = Resolver(transport, settings)
        return await resolver.resolve_many(urls, concurrency=concurrency)


async def _check_private(settings: Settings, url: str) -> bool:
    async with HttpTransport(settings) as transport:
        return await PrivacyChecker(transport).is_private(url)


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    settings = Settings.from_env(args.env)
    LogConfig.from_settings(settings, debug=args.debug)

    if args.command == "resolve":
        posts = asyncio.run(_resolve(settings, args.urls, args.concurrency))
        if args.as_json and len(posts) == 1:
            pp(posts[0], True)
        elif args.as_json:
            print(json.dumps([p.to_dict() for p in posts], indent=2, ensure_ascii=False))
        else:
            for url, post in zip(args.urls, posts):
                print(f"\n{url}")
                pp(post)
        sys.exit(0 if all(p.success for p in posts) else 1)

    elif args.command == "private":
        private = asyncio.run(_check_private(settings, args.url))
        print("private" if private else "public (or unknown)")
        sys.exit(0)

    elif args.command == "serve":
        import uvicorn
        from .server import create_app

        uvicorn.run(
            create_app(settings),
            host=args.host or settings.host,
            port=args.port or settings.port,
            log_level="debug" if args.debug else settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
