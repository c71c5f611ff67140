# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module loads configuration files written in yaml and checks them against a yamale schema."""

import logging
import os

import yamale
from yamale.schema import Schema
from yaml import YAMLError

from chartsyncer.errors import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)


def load_yaml_config(path: str | os.PathLike, schema: Schema) -> dict:
    """Return the single document of a yaml configuration file once it matches ``schema``.

    Parameters
    ----------
    path : str | os.PathLike
        The path to the configuration file.
    schema : Schema
        The yamale schema the document must match.

    Returns
    -------
    dict
        The loaded document.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, is empty, or does not match the schema.
    """
    logger.debug("Loading the configuration file %s.", path)
    try:
        documents = yamale.make_data(path)
    except YAMLError as error:
        mark = getattr(error, "problem_mark", None)
        location = f"{os.path.abspath(path)}:{mark.line + 1}:{mark.column + 1}" if mark else os.path.abspath(path)
        raise ConfigurationError(f"Cannot parse the configuration file {location}.") from error
    except OSError as error:
        raise ConfigurationError(f"Cannot read the configuration file {path}: {error}") from error

    if not documents or not isinstance(documents[0][0], dict):
        raise ConfigurationError(f"The configuration file {path} does not contain a mapping.")

    try:
        yamale.validate(schema, documents)
    except yamale.YamaleError as error:
        messages = [message for result in error.results for message in result.errors]
        for message in messages:
            logger.error("\t%s", message)
        raise ConfigurationError(f"The configuration file {path} is invalid: {'; '.join(messages)}") from error

    return dict(documents[0][0])
