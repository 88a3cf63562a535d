import psutil

def get_cpu_info():
    """
        CPU and memory figures shown in the overview.
        The SAP notes sapconf/saptune apply scale several settings with these.
    """
    freq = psutil.cpu_freq()
    memory = psutil.virtual_memory()
    cpu_info = {
        "physical_cores": psutil.cpu_count(logical=False),
        "total_cores": psutil.cpu_count(logical=True),
        "max_frequency": freq.max if freq else None,
        "memory_total_mb": memory.total // (1024 * 1024),
        "swap_total_mb": psutil.swap_memory().total // (1024 * 1024),
    }
    return cpu_info
