#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the CloudWatch agent installer.

Installs the Amazon CloudWatch agent if missing, writes its configuration and
starts it. Run ``install.py -h`` for the available options.
"""

import sys

from agent_installer.cli import main

if __name__ == "__main__":
    sys.exit(main())
