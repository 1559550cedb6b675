import random
from prometheus_client import CollectorRegistry
from src.common.metrics import TrafficMetrics
from src.traffic.application.builder import TrafficApplicationBuilder
from src.traffic.application.services.exporter import TrafficExporterService
from src.traffic.infrastructure.remote_write import RemoteWriteEncoder

def test_build_service(exporter_config):
    builder = TrafficApplicationBuilder(exporter_config, CollectorRegistry())
    service = builder.build_service()

    assert isinstance(service, TrafficExporterService)
    assert service.registry.names() == ["road-1", "Ayalon"]
    assert service.supervisor.entry_workers == 5
    assert service.supervisor.exit_workers == 3
    assert service.supervisor.seed == 7
    assert isinstance(service.encoder, RemoteWriteEncoder)

    components = builder.get_components()
    assert components['registry'] is service.registry
    assert isinstance(components['metrics'], TrafficMetrics)

def test_roads_use_configured_defaults(exporter_config):
    exporter_config.defaults.capacity = 60
    exporter_config.defaults.min_delay_ms = 250
    service = TrafficApplicationBuilder(exporter_config, CollectorRegistry()).build_service()

    rates = service.registry.get("Ayalon").rates
    assert rates.capacity == 60
    assert rates.min_delay_ms == 250
    assert service.metrics.get_value("traffic_pattern", road="Ayalon") == 2.0

def test_chained_build(exporter_config):
    builder = (
        TrafficApplicationBuilder(exporter_config, CollectorRegistry())
        .build_metrics()
        .build_registry()
        .build_controller()
        .build_simulator()
        .build_backfill()
    )
    assert builder.controller.registry is builder.registry
    assert builder.reconstructor.step.total_seconds() == 300

def test_seeded_backfill_is_reproducible(exporter_config, noon):
    first = TrafficApplicationBuilder(exporter_config, CollectorRegistry()).build_service()
    second = TrafficApplicationBuilder(exporter_config, CollectorRegistry()).build_service()

    assert first.backfill_payload(noon) == second.backfill_payload(noon)

def test_service_lifecycle(exporter_config):
    exporter_config.simulator.entry_workers = 1
    exporter_config.simulator.exit_workers = 1
    service = TrafficApplicationBuilder(exporter_config, CollectorRegistry()).build_service()

    service.start()
    try:
        assert service.is_running
        assert len(service.supervisor.workers) == 4
    finally:
        service.stop()
    assert not service.is_running

def test_status_reflects_pattern(exporter_config):
    service = TrafficApplicationBuilder(exporter_config, CollectorRegistry()).build_service()
    service.set_pattern("road-1", "night")

    status = {s.name: s for s in service.get_status()}
    assert status["road-1"].pattern == "night"
    assert status["road-1"].pattern_code == 1
    assert status["road-1"].capacity == 50
    assert status["Ayalon"].pattern == "normal"
