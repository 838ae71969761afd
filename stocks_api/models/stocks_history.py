from sqlalchemy import BigInteger, Column, Float, Integer, String, UniqueConstraint
from stocks_api.db.base import Base

class StockHistory(Base):
    __tablename__ = "stocks_history"
    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String, nullable=False)
    date = Column(BigInteger, nullable=False)  # epoch millis
    preco_abertura = Column(Float)
    preco_fechamento = Column(Float)
    preco_maximo = Column(Float)
    preco_minimo = Column(Float)
    preco_medio = Column(Float)
    quantidade_negociada = Column(BigInteger)
    quantidade_negocios = Column(BigInteger)
    volume_negociado = Column(Float)
    fator_ajuste = Column(Float)
    preco_fechamento_ajustado = Column(Float)
    fator_ajuste_desdobramentos = Column(Float)
    preco_fechamento_ajustado_desdobramentos = Column(Float)

    __table_args__ = (
        UniqueConstraint("ticker", "date", name="ux_stocks_history_ticker_date"),
    )


VALUE_FIELDS = (
    "preco_abertura",
    "preco_fechamento",
    "preco_maximo",
    "preco_minimo",
    "preco_medio",
    "quantidade_negociada",
    "quantidade_negocios",
    "volume_negociado",
    "fator_ajuste",
    "preco_fechamento_ajustado",
    "fator_ajuste_desdobramentos",
    "preco_fechamento_ajustado_desdobramentos",
)
