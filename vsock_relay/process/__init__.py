from .relay_process import RelayProcess
