"""Built-in ``nwscache`` sub-commands.

* :mod:`~nwscache.commands.fetch` -- ``fetch`` and ``forecast``.
* :mod:`~nwscache.commands.cache` -- ``cache path|list|purge``.
* :mod:`~nwscache.commands.config` -- ``config show|set|reset``.
"""
