from clients.gorest import GoRestClient, parse_total_count

__all__ = ["GoRestClient", "parse_total_count"]
