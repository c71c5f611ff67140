# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module provides functions to manage default values."""

import configparser
import logging
import os
import pathlib
import shutil

from chartsyncer.errors import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)


class ConfigParser(configparser.ConfigParser):
    """This class extends ConfigParser with useful methods."""

    def get_positive_int(self, section: str, item: str, fallback: int) -> int:
        """Parse and return a positive integer from an item in ``defaults.ini``.

        Parameters
        ----------
        section : str
            The section in ``defaults.ini``.
        item : str
            The item to parse.
        fallback : int
            The value returned when the section or the item is missing.

        Returns
        -------
        int
            The parsed value.

        Raises
        ------
        ConfigurationError
            If the value is not a positive integer.
        """
        try:
            value = self.getint(section, item, fallback=fallback)
        except ValueError as error:
            raise ConfigurationError(
                f'The value of "{item}" in section [{section}] of the .ini configuration file is invalid: {error}'
            ) from error

        if value <= 0:
            raise ConfigurationError(
                f'The value of "{item}" in section [{section}] of the .ini configuration file must be positive.'
            )
        return value


defaults = ConfigParser()


def load_defaults(user_config_path: str) -> bool:
    """Read the default values from ``defaults.ini`` file and store them in the defaults global object.

    Parameters
    ----------
    user_config_path : str
        The path to the user's defaults configuration file.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    curr_dir = pathlib.Path(__file__).parent.absolute()
    config_files = [os.path.join(curr_dir, "defaults.ini")]
    if os.path.exists(user_config_path):
        config_files.append(user_config_path)
    elif user_config_path:
        logger.error("Cannot find the user defaults file %s.", user_config_path)
        return False

    try:
        defaults.read(config_files, encoding="utf8")
        return True
    except (configparser.Error, ValueError) as error:
        logger.error("Failed to read the defaults.ini files.")
        logger.error(error)
        return False


def create_defaults(output_path: str, cwd_path: str) -> bool:
    """Create the ``defaults.ini`` file in the output directory for end users.

    Parameters
    ----------
    output_path : str
        The path where the ``defaults.ini`` will be created.
    cwd_path : str
        The path to the current working directory.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    src_path = os.path.join(pathlib.Path(__file__).parent.absolute(), "defaults.ini")
    dest_path = os.path.join(output_path, "defaults.ini")

    # ConfigParser.write does not preserve the comments, so the file is copied as is.
    try:
        shutil.copy2(src_path, dest_path)
    except OSError as error:
        logger.error("Failed to create %s: %s.", os.path.relpath(dest_path, cwd_path), error)
        return False

    logger.info("Dumped the default values in %s.", os.path.relpath(dest_path, cwd_path))
    return True
