"""
Solver callback for logging intermediate solutions of the workload balancing pass.
"""

import os
import time
from datetime import datetime

from ortools.sat.python import cp_model

from utils import flush_print


class SolutionPrinterCallback(cp_model.CpSolverSolutionCallback):
    """Prints intermediate solutions with progress metrics and logs to file."""

    def __init__(self, objective, log_file_path=None, verbose=True):
        cp_model.CpSolverSolutionCallback.__init__(self)
        self.__solution_count = 0
        self.__objective = objective
        self.__previous_objective = None
        self.__start_time = time.time()
        self.__log_file_path = log_file_path
        self.__verbose = verbose

        if self.__log_file_path:
            log_dir = os.path.dirname(self.__log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            with open(self.__log_file_path, "w", encoding="utf-8") as log_file:
                log_file.write("=== Workload Balancer Solution Log ===\n")
                log_file.write(f"Started: {datetime.now().isoformat()}\n")
                log_file.write("--------------------\n")

    def on_solution_callback(self):
        self.__solution_count += 1
        current_objective = self.Value(self.__objective)
        elapsed = time.time() - self.__start_time

        output = f"Solution {self.__solution_count}, objective = {current_objective}, time = {elapsed:.2f}s"
        if self.__previous_objective is not None:
            output += f" (up {current_objective - self.__previous_objective})"

        if self.__verbose:
            flush_print(output)

        if self.__log_file_path:
            with open(self.__log_file_path, "a", encoding="utf-8") as log_file:
                log_file.write(output + "\n")

        self.__previous_objective = current_objective

    def solution_count(self):
        return self.__solution_count

