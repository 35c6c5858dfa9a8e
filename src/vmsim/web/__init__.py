"""JSON web API for the simulator.

This package provides a Flask application that drives one simulator
over HTTP.  It is an **optional** extra — install with::

    pip install vmsim[web]

The ``create_app`` factory in ``app.py`` serves ``/api/vm``,
``/api/access`` and ``/api/stats``.
"""
