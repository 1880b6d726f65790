import asyncio
import json

import httpx
import pytest

from loja.adapters.gemini import ClienteGemini, ErroServicoTexto, extrair_texto
from loja.domain.models import Produto
from loja.usecases.insights import (
    MSG_ERRO,
    MSG_SEM_RESPOSTA,
    PainelInsights,
    gerar_insights,
    montar_payload,
    montar_prompt,
)


PRODUTOS = [Produto(id="P1", name="Cimento", quantity=4, min_threshold=5, price=100.0)]


class _ClienteFixo:
    def __init__(self, texto="", erro=None, espera=0.0):
        self.texto = texto
        self.erro = erro
        self.espera = espera
        self.prompts = []

    async def gerar_texto(self, prompt):
        self.prompts.append(prompt)
        await asyncio.sleep(self.espera)
        if self.erro:
            raise self.erro
        return self.texto


def test_payload_e_prompt():
    assert montar_payload(PRODUTOS) == [{"name": "Cimento", "quantity": 4, "minThreshold": 5, "price": 100.0}]
    assert '"minThreshold": 5' in montar_prompt(PRODUTOS)


def test_gerar_insights_ok():
    cliente = _ClienteFixo(texto="Repor cimento.")
    assert asyncio.run(gerar_insights(PRODUTOS, cliente)) == "Repor cimento."
    assert "Cimento" in cliente.prompts[0]


@pytest.mark.parametrize(
    "cliente,esperado",
    [
        (_ClienteFixo(erro=ErroServicoTexto("timeout")), MSG_ERRO),
        (_ClienteFixo(erro=RuntimeError("boom")), MSG_ERRO),
        (_ClienteFixo(texto=""), MSG_SEM_RESPOSTA),
    ],
)
def test_gerar_insights_fallback(cliente, esperado):
    assert asyncio.run(gerar_insights(PRODUTOS, cliente)) == esperado


def test_painel_descarta_resposta_antiga():
    class _Sequencial:
        def __init__(self):
            self.chamadas = 0

        async def gerar_texto(self, prompt):
            self.chamadas += 1
            n = self.chamadas
            # a primeira requisição demora mais que a segunda
            await asyncio.sleep(0.05 if n == 1 else 0.0)
            return f"resposta {n}"

    painel = PainelInsights(_Sequencial())

    async def _cenario():
        return await asyncio.gather(painel.atualizar(PRODUTOS), painel.atualizar(PRODUTOS))

    antiga, nova = asyncio.run(_cenario())
    assert antiga is None
    assert nova == "resposta 2"
    assert painel.texto == "resposta 2"
    assert painel.carregando is False


def test_cliente_gemini_monta_requisicao():
    capturado = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        capturado["url"] = str(request.url)
        capturado["corpo"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    cliente = ClienteGemini(api_key="k", modelo="m", transport=httpx.MockTransport(_handler))
    assert asyncio.run(cliente.gerar_texto("oi")) == "ok"
    assert "models/m:generateContent" in capturado["url"]
    assert "key=k" in capturado["url"]
    assert capturado["corpo"]["contents"][0]["parts"][0]["text"] == "oi"
    assert capturado["corpo"]["generationConfig"]["temperature"] == 0.7


def test_cliente_gemini_erros():
    def _handler(request):
        return httpx.Response(500, json={"error": "x"})

    cliente = ClienteGemini(api_key="k", transport=httpx.MockTransport(_handler))
    with pytest.raises(ErroServicoTexto):
        asyncio.run(cliente.gerar_texto("oi"))
    with pytest.raises(ErroServicoTexto):
        asyncio.run(ClienteGemini(api_key="").gerar_texto("oi"))


def test_extrair_texto():
    assert extrair_texto({}) == ""
    assert extrair_texto({"candidates": []}) == ""
    assert extrair_texto({"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}) == "ab"
