from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter("isoboot_requests_total", "Total HTTP requests", ["method", "status"])
REQUEST_LATENCY = Histogram("isoboot_request_latency_seconds", "Request latency", ["method"])
BYTES_SERVED = Counter("isoboot_bytes_served_total", "File bytes streamed from the image")
BOOT_SCRIPTS = Counter("isoboot_boot_scripts_total", "Boot script requests", ["result"])
HANDLES_OPENED = Counter("isoboot_image_handles_opened_total", "Image file handles opened")
