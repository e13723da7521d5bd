"""Built-in CLI sub-commands for crude.

* :mod:`~crude.commands.init` -- write a starter ``crude.json`` definition.
* :mod:`~crude.commands.inspect` -- pluralize names and list declared
  resources.
* :mod:`~crude.commands.request` -- build (``url``) or send (``call``) a
  request for a resource operation.

Each module exports plain callback functions registered directly on the
root app in :mod:`crude.app`.
"""
