import logging

decoder_logger = logging.getLogger("cookiecodec.decoder")
encoder_logger = logging.getLogger("cookiecodec.encoder")
