#!/usr/bin/env -S uv run --quiet --script
# /// script
# dependencies = [
#   "pyyaml",
#   "click>=8.0",
# ]
# ///
"""
Helm Deployment - Render local Helm charts into namespaced test deployments.
Writes a single manifest file that can be applied with kubectl.
"""

from helm_deployment import cli

if __name__ == "__main__":
    cli()
