"""
CloudWatch agent installer.

This package installs, configures and starts the Amazon CloudWatch agent on
the local host. Run it through ``install.py`` or the ``cloudwatch-agent-setup``
console script.
"""
