# crossbuild/shared/container.py
from dependency_injector import containers, providers

from crossbuild.shared.config import BuildConfig, Settings
from crossbuild.adapters.platform_opener import HostPlatformOpener
from crossbuild.adapters.subprocess_runner import SubprocessCommandRunner

from crossbuild.core.use_cases.build_app import BuildApp
from crossbuild.core.use_cases.doctor import Doctor
from crossbuild.core.use_cases.launch_app import LaunchApp
from crossbuild.core.use_cases.simulator import SimulatorControl


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Assembly instructions for the CLI. Tests override `command_runner`
    and `build_config` to run pipelines without real toolchains.
    """

    # 1. Configuration
    settings = providers.Singleton(Settings)

    # Frozen snapshot handed to the core; debug is applied per request
    build_config = providers.Singleton(BuildConfig.from_settings, settings=settings)

    # 2. Gateways (Infrastructure Adapters)
    command_runner = providers.Singleton(SubprocessCommandRunner)

    # Host OS resolved once, at startup
    platform_opener = providers.Singleton(HostPlatformOpener)

    # 3. Use Cases (Application Logic)
    build_app_use_case = providers.Factory(
        BuildApp,
        config=build_config,
        runner=command_runner,
    )

    launch_app_use_case = providers.Factory(
        LaunchApp,
        config=build_config,
        runner=command_runner,
        opener=platform_opener,
    )

    simulator_use_case = providers.Factory(
        SimulatorControl,
        config=build_config,
        runner=command_runner,
    )

    doctor_use_case = providers.Factory(
        Doctor,
        config=build_config,
        runner=command_runner,
    )


# Instantiate the container for global access (e.g. by the CLI)
container = Container()
