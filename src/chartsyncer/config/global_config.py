# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the GlobalConfig class to be used globally."""

from dataclasses import dataclass


@dataclass
class GlobalConfig:
    """Class for keeping track of global configurations."""

    #: The path to the output files.
    output_path: str = ""

    def load(self, output_path: str) -> None:
        """Initiate the GlobalConfig object.

        Parameters
        ----------
        output_path : str
            The directory receiving the log file and the dumped defaults.
        """
        self.output_path = output_path


global_config = GlobalConfig()
