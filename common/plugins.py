"""
Plugin architecture for reading list destinations.

Each destination (a CSV reading list, Raindrop.io, ...) implements a plugin
that inherits from BaseSinkPlugin and registers itself with the plugin
registry. The plugin builds the argument parser for its options and the sink
that links are added to.
"""

import abc
import argparse
import importlib
import inspect
from typing import Dict, Iterable, Optional, Type

SINK_PACKAGES = ("csv_export", "raindrop_api")


class BaseSinkPlugin(abc.ABC):
    """
    Base class for destination plugins.

    All destination plugins should inherit from this class and implement
    the required methods.
    """

    @classmethod
    @abc.abstractmethod
    def get_name(cls) -> str:
        """
        Get the name of the destination.

        Returns
        -------
        str
            The name used on the command line (e.g., 'csv', 'raindrop-api').
        """

    @classmethod
    @abc.abstractmethod
    def get_description(cls) -> str:
        """
        Get a description of the destination.

        Returns
        -------
        str
            A description of the destination.
        """

    @classmethod
    @abc.abstractmethod
    def create_parser(cls) -> argparse.ArgumentParser:
        """
        Create an argument parser for this destination.

        Returns
        -------
        argparse.ArgumentParser
            A parser (without ``-h``) usable as a subcommand parent.
        """

    @classmethod
    @abc.abstractmethod
    def create_sink(cls, args: argparse.Namespace):
        """
        Create the sink that links are added to.

        Parameters
        ----------
        args : argparse.Namespace
            Parsed command line arguments.

        Returns
        -------
        importer.sink.BaseLinkSink
            A ready to use sink.
        """


class PluginRegistry:
    """
    Registry for destination plugins.
    """

    _plugins: Dict[str, Type[BaseSinkPlugin]] = {}

    @classmethod
    def register(cls, plugin_class: Type[BaseSinkPlugin]) -> None:
        """
        Register a plugin with the registry.

        Parameters
        ----------
        plugin_class : Type[BaseSinkPlugin]
            The plugin class to register.
        """
        cls._plugins[plugin_class.get_name()] = plugin_class

    @classmethod
    def get_plugin(cls, name: str) -> Optional[Type[BaseSinkPlugin]]:
        """
        Get a plugin by name.

        Parameters
        ----------
        name : str
            The name of the plugin to get.

        Returns
        -------
        Optional[Type[BaseSinkPlugin]]
            The plugin class if found, None otherwise.
        """
        return cls._plugins.get(name)

    @classmethod
    def get_all_plugins(cls) -> Dict[str, Type[BaseSinkPlugin]]:
        """
        Get all registered plugins.

        Returns
        -------
        Dict[str, Type[BaseSinkPlugin]]
            A dictionary mapping plugin names to plugin classes.
        """
        return cls._plugins.copy()

    @classmethod
    def discover_plugins(cls, packages: Iterable[str] = SINK_PACKAGES) -> None:
        """
        Import the destination packages and register the plugins they define.

        Parameters
        ----------
        packages : Iterable[str], optional
            Names of the packages to search (default: the bundled destinations).
        """
        for package_name in packages:
            package = importlib.import_module(package_name)
            for _, obj in inspect.getmembers(package, inspect.isclass):
                if issubclass(obj, BaseSinkPlugin) and obj is not BaseSinkPlugin and not inspect.isabstract(obj):
                    cls.register(obj)


def register_plugin(plugin_class: Type[BaseSinkPlugin]) -> Type[BaseSinkPlugin]:
    """
    Decorator to register a plugin with the registry.

    Parameters
    ----------
    plugin_class : Type[BaseSinkPlugin]
        The plugin class to register.

    Returns
    -------
    Type[BaseSinkPlugin]
        The plugin class (unchanged).
    """
    PluginRegistry.register(plugin_class)
    return plugin_class
