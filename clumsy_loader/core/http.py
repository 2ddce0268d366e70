import requests
from requests.adapters import HTTPAdapter, Retry

from .. import __version__

UA = f"ClumsyLoader/{__version__}"

def make_session(user_agent: str = UA) -> requests.Session:
    # total=0: a failed request surfaces to the caller, never retried
    retries = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retries, pool_connections=4, pool_maxsize=4)
    s = requests.Session()
    s.mount("http://", adapter); s.mount("https://", adapter)
    s.headers.update({"User-Agent": user_agent})
    return s

SESSION = make_session()
