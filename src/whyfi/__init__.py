"""WhyFi - network health core.

Samples Wi-Fi, router, internet and DNS telemetry on a fixed cadence, keeps
a bounded per-metric history, classifies every reading, and runs one of
three on-demand diagnostics: interference scan, speed test or AI diagnosis.

Quick start::

    from whyfi.host import HostRpcClient
    from whyfi.polling import PollingScheduler

    async with HostRpcClient() as host:
        scheduler = PollingScheduler(host)
        scheduler.start()
"""

__version__ = "0.1.0"
