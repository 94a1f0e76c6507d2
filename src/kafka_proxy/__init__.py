# Operations
from .client import ProxyClient as ProxyClient
from .config import ProxyConfig as ProxyConfig
from .consumer import consume as consume
from .consumer import consume_endpoint as consume_endpoint
from .consumer import create_consumer as create_consumer
from .consumer import delete_consumer as delete_consumer
from .consumer import new_consumer_request as new_consumer_request
from .polling import wait_for as wait_for
from .producer import produce as produce

# Errors
from .errors import DecodeError as DecodeError
from .errors import ProxyError as ProxyError
from .errors import RequestValidationError as RequestValidationError
from .errors import StatusError as StatusError
from .errors import TransportError as TransportError
from .errors import WaitTimeoutError as WaitTimeoutError

# Wire models
from .models import ConsumerEndpoint as ConsumerEndpoint
from .models import ConsumerRequest as ConsumerRequest
from .models import Format as Format
from .models import Message as Message
from .models import OffsetReset as OffsetReset
from .models import ProducerMessage as ProducerMessage
from .models import ProducerOffsets as ProducerOffsets
from .models import ProducerRecord as ProducerRecord
from .models import ProducerResponse as ProducerResponse

# Observability helpers
from .observability import logger as logger
from .observability import metrics as metrics

# Transports
from .transport import HTTPRequest as HTTPRequest
from .transport import HTTPResponse as HTTPResponse
from .transport import HTTPXTransport as HTTPXTransport
from .transport import RequestsTransport as RequestsTransport
from .transport import Transport as Transport

__version__ = "0.1.0"
