"""Built-in CLI sub-commands for swagger-refract.

* :mod:`~swagger_refract.commands.parse` -- ``parse``, ``detect`` and
  ``annotations``, registered directly on the root app.
* :mod:`~swagger_refract.commands.config` -- view and modify the user
  configuration.
"""
